import logging

from linkshortener.dao.redis import ShortURLRedisDAO, ClickRedisDAO
from linkshortener.services import AnalyticsReader
from linkshortener.types import LambdaContext, LambdaEvent, LambdaResponse
from linkshortener.utils import load_config, base_url, app_prefix
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.utils.responses import response_200, response_500
from linkshortener.lambdas.list_urls.constants import CONFIGURATION_ERROR, LIST_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests listing every short URL

    Responds 200 with one summary per short URL, newest first.
    """
    try:
        app_config = load_config('list_urls')
    except (FileNotFoundError, KeyError):
        logger.exception('Failed to load AppConfig for list URLs function. Responding with 500.')
        return response_500(message='An error occurred while listing short URLs', error_code=CONFIGURATION_ERROR)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    analytics = AnalyticsReader(
        ShortURLRedisDAO(**redis_config, prefix=app_prefix()),
        ClickRedisDAO(**redis_config, prefix=app_prefix()),
        base_url=base_url(event),
    )
    summaries = analytics.list_all()

    logger.info('Listed %s short URLs. Responding with 200.', len(summaries), extra={'event': LIST_SUCCESS})
    return response_200([summary.to_dict() for summary in summaries])
