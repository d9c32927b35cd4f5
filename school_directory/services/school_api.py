import logging
from typing import List, Optional

import requests

from school_directory.models.school import School, SchoolInput

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = 'Network error. Please check your connection and try again.'
FETCH_FAILED_MESSAGE = 'Failed to fetch schools'
ADD_FAILED_MESSAGE = 'Error adding school'

SCHOOLS_PATH = '/api/schools'


def is_success(response) -> bool:
    """Only 2xx statuses count as success, unlike Response.ok"""
    return 200 <= response.status_code < 300


class SchoolApiError(Exception):
    """Base class for failures talking to the School API"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(SchoolApiError):
    """The school list could not be retrieved"""


class ServerRejection(SchoolApiError):
    """The API answered a submission with a non-2xx status"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class TransportError(SchoolApiError):
    """The request never produced a response (connection refused, timeout, ...)"""


class SchoolApiClient:
    """Client for the remote School API, registered on the app like a Flask extension"""

    def __init__(self, app=None, base_url: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or '').rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.base_url = app.config['SCHOOLS_API_URL'].rstrip('/')
        self.timeout = app.config.get('SCHOOLS_API_TIMEOUT', self.timeout)
        app.extensions['school_api'] = self

    @property
    def schools_url(self) -> str:
        return f"{self.base_url}{SCHOOLS_PATH}"

    def fetch_schools(self) -> List[School]:
        """GET the full school list. Raises FetchError on any failure."""
        logger.info(f"Fetching schools from {self.schools_url}")
        try:
            response = self.session.get(self.schools_url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"School list request failed: {str(e)}")
            raise FetchError(NETWORK_ERROR_MESSAGE) from e

        if not is_success(response):
            logger.error(f"School list HTTP error: {response.status_code}")
            raise FetchError(FETCH_FAILED_MESSAGE)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"School list response is not JSON: {str(e)}")
            raise FetchError(NETWORK_ERROR_MESSAGE) from e

        if not isinstance(payload, list):
            logger.error(f"School list response is not an array: {type(payload).__name__}")
            raise FetchError(FETCH_FAILED_MESSAGE)

        schools = [School.from_dict(item) for item in payload if isinstance(item, dict)]
        logger.info(f"Fetched {len(schools)} schools")
        return schools

    def create_school(self, school: SchoolInput) -> dict:
        """POST a new school as multipart/form-data.

        Returns the decoded response body (empty dict when the body is not JSON).
        Raises ServerRejection for non-2xx answers and TransportError when the
        request does not complete.
        """
        files = {
            'image': (school.image.filename, school.image.data, school.image.content_type),
        }
        logger.info(f"Submitting school '{school.name}' to {self.schools_url}")
        try:
            response = self.session.post(
                self.schools_url,
                data=school.form_fields(),
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"School submission failed: {str(e)}")
            raise TransportError(NETWORK_ERROR_MESSAGE) from e

        try:
            result = response.json()
        except ValueError:
            result = {}
        if not isinstance(result, dict):
            result = {}

        if not is_success(response):
            message = result.get('message') or ADD_FAILED_MESSAGE
            logger.warning(f"School submission rejected ({response.status_code}): {message}")
            raise ServerRejection(message, response.status_code)

        logger.info(f"School '{school.name}' added")
        return result
