import logging

from linkshortener.dao.exceptions import ShortURLNotFoundError
from linkshortener.dao.redis import ShortURLRedisDAO, ClickRedisDAO
from linkshortener.services import AnalyticsReader
from linkshortener.types import LambdaContext, LambdaEvent, LambdaResponse
from linkshortener.utils import load_config, base_url, app_prefix
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.utils.responses import response_200, response_400, response_404, response_500
from linkshortener.lambdas.url_stats.constants import (
    CONFIGURATION_ERROR,
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    STATS_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for short URL statistics

    HTTP responses:
        200: Statistics of the short URL, clicks most recent first
        400: Bad client request (missing shortcode)
        404: Shortcode doesn't exist
        500: Internal server error
    """
    # 0- Get application's config
    try:
        app_config = load_config('url_stats')
    except (FileNotFoundError, KeyError):
        logger.exception('Failed to load AppConfig for URL stats function. Responding with 500.')
        return response_500(message='An error occurred while fetching statistics', error_code=CONFIGURATION_ERROR)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract shortcode from path parameters
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing shortcode in path parameters. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(error='Missing shortcode', message='Shortcode is required', error_code=MISSING_SHORTCODE)

    # 2- Compute statistics
    analytics = AnalyticsReader(
        ShortURLRedisDAO(**redis_config, prefix=app_prefix()),
        ClickRedisDAO(**redis_config, prefix=app_prefix()),
        base_url=base_url(event),
    )
    try:
        stats = analytics.statistics(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL not found. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message='The requested shortcode does not exist', error_code=SHORT_URL_NOT_FOUND)

    logger.info('Statistics retrieved. Responding with 200.', extra={'shortcode': shortcode, 'event': STATS_SUCCESS})
    return response_200(stats.to_dict())
