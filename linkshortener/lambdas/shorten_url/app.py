import json
import logging

from linkshortener.constants import Defaults
from linkshortener.dao.redis import ShortURLRedisDAO, ClickRedisDAO
from linkshortener.exceptions import (
    ConfigurationError,
    DuplicateShortcodeError,
    GenerationExhaustedError,
    InvalidShortcodeFormatError,
    InvalidUrlFormatError,
    InvalidValidityPeriodError,
    MissingUrlError,
    PersistenceError,
)
from linkshortener.services import ShortcodeLifecycleManager, UniquenessResolver
from linkshortener.types import LambdaContext, LambdaEvent, LambdaResponse
from linkshortener.utils import load_config, base_url, app_prefix
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.utils.responses import response_201, response_400, response_409, response_500
from linkshortener.lambdas.shorten_url.constants import (
    CONFIGURATION_ERROR,
    DUPLICATE_SHORTCODE,
    GENERATION_EXHAUSTED,
    INVALID_JSON_BODY,
    INVALID_SHORTCODE_FORMAT,
    INVALID_URL_FORMAT,
    INVALID_VALIDITY_PERIOD,
    MISSING_URL,
    PERSISTENCE_ERROR,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract url, validity and shortcode from request body
    - Step 2: Wire the lifecycle manager to the data store
    - Step 3: Validate the request and persist the short URL
    - Step 4: Respond to user with 201 created

    HTTP responses:
        201: Successful URL shortening
            shortLink, expiry, shortcode, originalUrl, validityMinutes
        400: Bad client request
            missing url, invalid JSON, invalid url, validity or shortcode
        409: Conflict
            custom shortcode already in use
        500: Internal server error
            shortcode generation exhausted or short URL not persisted

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"url": "https://example.com", "validity": 60}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
    except (FileNotFoundError, KeyError):
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500(message='An error occurred while creating the short URL', error_code=CONFIGURATION_ERROR)
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        settings = app_config.get('settings', {})

    # 1- Extract request parameters from body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        request_body = None
    if not isinstance(request_body, dict):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(error='Invalid JSON body', message='Request body must be a JSON object', error_code=INVALID_JSON_BODY)

    # 2- Wire the lifecycle manager to the data store
    short_url_dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())
    click_dao = ClickRedisDAO(**redis_config, prefix=app_prefix())
    try:
        resolver = UniquenessResolver(
            short_url_dao,
            length=settings.get('shortcode_length', Defaults.SHORTCODE_LENGTH),
            max_attempts=settings.get('max_attempts', Defaults.MAX_GENERATION_ATTEMPTS),
        )
    except ConfigurationError:
        logger.exception('Invalid shortcode settings in AppConfig. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500(message='An error occurred while creating the short URL', error_code=CONFIGURATION_ERROR)
    manager = ShortcodeLifecycleManager(
        short_url_dao,
        click_dao,
        base_url=base_url(event),
        resolver=resolver,
        default_validity=settings.get('default_validity_minutes', Defaults.VALIDITY_MINUTES),
    )

    # 3- Validate request & persist short URL
    try:
        created = manager.create(
            url=request_body.get('url'),
            validity=request_body.get('validity'),
            shortcode=request_body.get('shortcode'),
        )
    except MissingUrlError as e:
        return response_400(error='URL is required', message=str(e), error_code=MISSING_URL)
    except InvalidUrlFormatError as e:
        return response_400(error='Invalid URL format', message=str(e), error_code=INVALID_URL_FORMAT)
    except InvalidValidityPeriodError as e:
        return response_400(error='Invalid validity period', message=str(e), error_code=INVALID_VALIDITY_PERIOD)
    except InvalidShortcodeFormatError as e:
        return response_400(error='Invalid shortcode format', message=str(e), error_code=INVALID_SHORTCODE_FORMAT)
    except DuplicateShortcodeError:
        return response_409(
            message='The requested shortcode is already in use. Please choose a different one.',
            error_code=DUPLICATE_SHORTCODE,
        )
    except GenerationExhaustedError:
        logger.error('Shortcode generation exhausted. Responding with 500.', extra={'event': GENERATION_EXHAUSTED})
        return response_500(message='Unable to generate unique shortcode. Please try again.', error_code=GENERATION_EXHAUSTED)
    except PersistenceError:
        logger.error('Short URL not persisted. Responding with 500.', extra={'event': PERSISTENCE_ERROR})
        return response_500(message='An error occurred while creating the short URL', error_code=PERSISTENCE_ERROR)

    # 4- Return successful response to user
    logger.info(
        'Short URL created. Responding with 201.',
        extra={'shortcode': created.short_url.shortcode, 'event': SHORTEN_SUCCESS},
    )
    return response_201(created.to_dict())
