import logging

from linkshortener.dao.exceptions import ShortURLNotFoundError
from linkshortener.dao.redis import ShortURLRedisDAO, ClickRedisDAO
from linkshortener.exceptions import ShortURLExpiredError
from linkshortener.services import ShortcodeLifecycleManager
from linkshortener.types import LambdaContext, LambdaEvent, LambdaResponse
from linkshortener.utils import load_config, base_url, app_prefix, isoformat
from linkshortener.utils.helpers import client_ip, guarantee_500_response, header
from linkshortener.utils.responses import response_302, response_400, response_404, response_410, response_500
from linkshortener.lambdas.redirect_url.constants import (
    CONFIGURATION_ERROR,
    MISSING_SHORTCODE,
    REDIRECT_SUCCESS,
    RESERVED_PATHS,
    SHORT_URL_EXPIRED,
    SHORT_URL_NOT_FOUND,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect short URLs:
    - Step 1: Extract the shortcode from the path parameters
    - Step 2: Fetch the short URL and check it has not expired
    - Step 3: Record the click (best-effort)
    - Step 4: Redirect user to the original URL

    HTTP responses:
        302: Successful redirect, Location header set to the original URL
        400: Bad client request (missing shortcode)
        404: Shortcode doesn't exist or belongs to another route
        410: Short URL expired, expiredAt set to its expiry
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format.
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
    except (FileNotFoundError, KeyError):
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.')
        return response_500(message='An error occurred while processing the redirect', error_code=CONFIGURATION_ERROR)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract shortcode from path parameters
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing shortcode in path parameters. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(error='Missing shortcode', message='Shortcode is required', error_code=MISSING_SHORTCODE)

    if shortcode in RESERVED_PATHS:
        return response_404(error='Not found', message='The requested resource does not exist', error_code=SHORT_URL_NOT_FOUND)

    # 2- Fetch short URL & check expiry
    manager = ShortcodeLifecycleManager(
        ShortURLRedisDAO(**redis_config, prefix=app_prefix()),
        ClickRedisDAO(**redis_config, prefix=app_prefix()),
        base_url=base_url(event),
    )
    try:
        short_url = manager.fetch_for_redirect(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL not found. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message='The requested shortcode does not exist', error_code=SHORT_URL_NOT_FOUND)
    except ShortURLExpiredError as e:
        logger.info(
            'Short URL expired. Responding with 410.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED},
        )
        return response_410(expired_at=isoformat(e.expired_at), error_code=SHORT_URL_EXPIRED)

    # 3- Record the click, never blocking the redirect
    manager.record_click(
        shortcode,
        referrer=header(event, 'Referer'),
        ip_address=client_ip(event),
        user_agent=header(event, 'User-Agent'),
    )

    # 4- Redirect user to original URL
    logger.info(
        'Redirecting user to original URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=short_url.target)
