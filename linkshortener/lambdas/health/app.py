from datetime import datetime, UTC

from linkshortener.constants import Defaults
from linkshortener.types import LambdaContext, LambdaEvent, LambdaResponse
from linkshortener.utils import isoformat
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.utils.responses import response_200


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Liveness probe. Touches no data store."""
    return response_200({
        'status': 'OK',
        'timestamp': isoformat(datetime.now(UTC)),
        'service': Defaults.SERVICE_NAME,
    })
