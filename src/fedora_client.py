"""
Fedora 4 REST API Client

This module provides functionality to interact with a Fedora 4 repository
for creating containers and binaries, patching their RDF properties with
SPARQL updates and taking version snapshots.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from constants import APIConfig
from core.delta import TripleDelta
from core.errors import ConfigError, TransportError

logger = logging.getLogger(__name__)


class FedoraAPIError(TransportError):
    """Exception raised for Fedora API errors."""

    def __init__(self, status_code: int, error_code: str, message: str):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        super().__init__(f"[{error_code}] {message} (HTTP {status_code})")


class TransientAPIError(FedoraAPIError):
    """Exception for transient API errors (429, 503) that should be retried."""

    def __init__(self, status_code: int, retry_after: int = 5, message: str = ""):
        self.retry_after = retry_after
        super().__init__(status_code, "Transient", message)


# Only requests the server explicitly refused are retried; anything that
# may have been applied is surfaced to the caller.
_retry_transient = retry(
    stop=stop_after_attempt(APIConfig.MAX_RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=2, min=2, max=60),
    retry=retry_if_exception_type(TransientAPIError),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


@dataclass
class FedoraConfig:
    """Configuration for Fedora API access."""
    base_url: str = APIConfig.DEFAULT_BASE_URL
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: int = APIConfig.DEFAULT_TIMEOUT_SECONDS
    verify_ssl: bool = True

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'FedoraConfig':
        """Create FedoraConfig from a dictionary."""
        fedora_config = config_dict.get('fedora', config_dict)
        if not isinstance(fedora_config, dict):
            raise ConfigError(f"'fedora' section must be an object, got {type(fedora_config).__name__}")

        base_url = fedora_config.get('base_url', APIConfig.DEFAULT_BASE_URL)
        if not base_url or not isinstance(base_url, str):
            raise ConfigError("fedora.base_url is required")
        if not base_url.startswith(('http://', 'https://')):
            raise ConfigError(f"fedora.base_url must be an http(s) URL, got {base_url!r}")

        try:
            timeout = int(fedora_config.get('timeout', APIConfig.DEFAULT_TIMEOUT_SECONDS))
        except (TypeError, ValueError):
            raise ConfigError(f"fedora.timeout must be an integer, got {fedora_config.get('timeout')!r}")

        return cls(
            base_url=base_url.rstrip('/'),
            username=fedora_config.get('username'),
            password=fedora_config.get('password'),
            timeout=timeout,
            verify_ssl=bool(fedora_config.get('verify_ssl', True)),
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'FedoraConfig':
        """Load configuration from a JSON file."""
        if not config_path:
            raise ConfigError("config_path cannot be empty")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except FileNotFoundError:
            raise ConfigError(
                f"Configuration file not found: {config_path}. "
                f"Please create a config.json file with your Fedora settings."
            )
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {config_path}: {e}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Encoding error reading {config_path}: {e}")

        if not isinstance(config_dict, dict):
            raise ConfigError(f"Configuration file must contain a JSON object, got {type(config_dict)}")

        return cls.from_dict(config_dict)


class FedoraResource:
    """A container (or any RDF source) in the Fedora repository."""

    def __init__(self, client: 'FedoraRepositoryClient', path: str, uri: str):
        self.client = client
        self.path = path
        self.uri = uri

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.uri!r})"

    @property
    def properties_uri(self) -> str:
        """URI receiving SPARQL updates for this resource."""
        return self.uri

    def update_properties(self, delta: TripleDelta) -> None:
        self.client.update_properties(self.properties_uri, delta.to_sparql_update())

    def create_version_snapshot(self, label: str) -> None:
        self.client.create_version_snapshot(self.uri, label)


class FedoraObject(FedoraResource):
    """A Fedora 4 container standing for a migrated legacy object."""


class FedoraDatastream(FedoraResource):
    """A Fedora 4 binary; its properties live at ``fcr:metadata``."""

    @property
    def properties_uri(self) -> str:
        return f"{self.uri}{APIConfig.METADATA_SUFFIX}"

    def update_content(self, content: bytes, mime_type: Optional[str] = None) -> None:
        self.client.update_content(self.uri, content, mime_type)


class FedoraRepositoryClient:
    """
    Client for the Fedora 4 REST API.

    This client provides methods for:
    - Creating containers and binaries
    - Creating redirect (external content) binaries
    - Replacing binary content
    - Applying SPARQL updates
    - Creating version snapshots
    """

    def __init__(self, config: FedoraConfig, session: Optional[requests.Session] = None):
        """
        Initialize the Fedora client.

        Args:
            config: FedoraConfig instance with connection details
            session: Optional requests session (a new one is created otherwise)
        """
        if not config:
            raise ValueError("config cannot be None")

        if not isinstance(config, FedoraConfig):
            raise TypeError(f"config must be FedoraConfig instance, got {type(config)}")

        self.config = config
        self.session = session or requests.Session()
        if config.username:
            self.session.auth = (config.username, config.password or "")
        self.session.verify = config.verify_ssl

    def url_for(self, path: str) -> str:
        """Absolute URI of a repository path."""
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def _make_request(
        self,
        method: str,
        url: str,
        operation_name: str,
        timeout: Optional[int] = None,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request with consistent error handling.

        Args:
            method: HTTP method (GET, PUT, POST, PATCH)
            url: URL to request
            operation_name: Description of operation (for logging)
            timeout: Request timeout in seconds (default: from config)
            **kwargs: Additional arguments to pass to requests

        Returns:
            Response object

        Raises:
            FedoraAPIError: On any request failure with consistent error codes
        """
        timeout = timeout or self.config.timeout
        try:
            logger.debug(f"{operation_name}: {method} {url}")
            return self.session.request(method, url, timeout=timeout, **kwargs)

        except requests.exceptions.Timeout:
            logger.error(f"{operation_name}: Request timeout after {timeout}s")
            raise FedoraAPIError(
                status_code=408,
                error_code='RequestTimeout',
                message=f'{operation_name} timed out after {timeout} seconds'
            )

        except requests.exceptions.ConnectionError as e:
            logger.error(f"{operation_name}: Connection error: {e}")
            raise FedoraAPIError(
                status_code=503,
                error_code='ConnectionError',
                message=f'{operation_name} failed to connect to Fedora: {e}'
            )

        except requests.exceptions.RequestException as e:
            logger.error(f"{operation_name}: Request error: {e}")
            raise FedoraAPIError(
                status_code=500,
                error_code='RequestError',
                message=f'{operation_name} request failed: {e}'
            )

    def _handle_response(self, response: requests.Response, operation_name: str) -> requests.Response:
        """Check an API response and raise appropriate errors."""
        if 200 <= response.status_code < 300:
            return response

        # Handle transient errors (429, 503) - raise special exception for retry
        if response.status_code in (429, 503):
            retry_after = _retry_after(response, default=10)
            logger.warning(f"{operation_name}: HTTP {response.status_code}. Retry after {retry_after}s")
            raise TransientAPIError(response.status_code, retry_after, f"{operation_name}: {response.text[:200]}")

        error_codes = {
            400: 'BadRequest',
            401: 'Unauthorized',
            403: 'Forbidden',
            404: 'NotFound',
            409: 'Conflict',
            410: 'Gone',
            412: 'PreconditionFailed',
            415: 'UnsupportedMediaType',
        }
        raise FedoraAPIError(
            status_code=response.status_code,
            error_code=error_codes.get(response.status_code, 'Unknown'),
            message=f"{operation_name} failed: {response.text[:500] or response.reason}",
        )

    def _created_uri(self, response: requests.Response, url: str) -> str:
        return response.headers.get('Location') or url

    @_retry_transient
    def get_repository_info(self) -> Dict[str, Any]:
        """Fetch the repository root; used to check connectivity and credentials."""
        url = self.config.base_url
        response = self._make_request(
            'GET', url, 'Get repository root',
            headers={'Accept': 'application/ld+json'},
        )
        self._handle_response(response, 'Get repository root')
        try:
            return {'status_code': response.status_code, 'body': response.json()}
        except ValueError:
            return {'status_code': response.status_code, 'body': response.text}

    @_retry_transient
    def create_object(self, path: str) -> FedoraObject:
        """
        Create a container.

        Args:
            path: Repository path of the new container

        Returns:
            Handle of the created container
        """
        url = self.url_for(path)
        logger.info(f"Creating object {path}")

        response = self._make_request('PUT', url, f'Create object {path}')
        self._handle_response(response, f'Create object {path}')
        return FedoraObject(self, path, self._created_uri(response, url))

    @_retry_transient
    def create_datastream(
        self,
        path: str,
        content: bytes,
        mime_type: Optional[str] = None,
    ) -> FedoraDatastream:
        """
        Create a binary.

        Args:
            path: Repository path of the new binary
            content: Binary content
            mime_type: Content type (default: application/octet-stream)

        Returns:
            Handle of the created binary
        """
        url = self.url_for(path)
        logger.info(f"Creating datastream {path} ({len(content)} bytes)")

        response = self._make_request(
            'PUT', url, f'Create datastream {path}',
            timeout=APIConfig.CONTENT_TIMEOUT_SECONDS,
            headers={'Content-Type': mime_type or 'application/octet-stream'},
            data=content,
        )
        self._handle_response(response, f'Create datastream {path}')
        return FedoraDatastream(self, path, self._created_uri(response, url))

    @_retry_transient
    def create_or_update_redirect_datastream(self, path: str, url: str) -> FedoraDatastream:
        """
        Create or replace a binary whose content is the resource at url.

        Fetching the binary from Fedora redirects to url.
        """
        resource_url = self.url_for(path)
        logger.info(f"Creating redirect datastream {path} -> {url}")

        response = self._make_request(
            'PUT', resource_url, f'Create redirect datastream {path}',
            headers={'Content-Type': f'message/external-body; access-type=URL; URL="{url}"'},
        )
        self._handle_response(response, f'Create redirect datastream {path}')
        return FedoraDatastream(self, path, self._created_uri(response, resource_url))

    @_retry_transient
    def update_content(self, uri: str, content: bytes, mime_type: Optional[str] = None) -> None:
        """Replace the content of the binary at uri."""
        logger.debug(f"Updating content of {uri} ({len(content)} bytes)")

        response = self._make_request(
            'PUT', uri, f'Update content {uri}',
            timeout=APIConfig.CONTENT_TIMEOUT_SECONDS,
            headers={'Content-Type': mime_type or 'application/octet-stream'},
            data=content,
        )
        self._handle_response(response, f'Update content {uri}')

    @_retry_transient
    def update_properties(self, uri: str, sparql_update: str) -> None:
        """Apply a SPARQL update to the resource at uri."""
        logger.debug(f"SPARQL update for {uri}:\n{sparql_update}")

        response = self._make_request(
            'PATCH', uri, f'Update properties {uri}',
            headers={'Content-Type': APIConfig.SPARQL_UPDATE_CONTENT_TYPE},
            data=sparql_update.encode('utf-8'),
        )
        self._handle_response(response, f'Update properties {uri}')

    @_retry_transient
    def create_version_snapshot(self, uri: str, label: str) -> None:
        """Record the current state of the resource at uri as version label."""
        logger.debug(f"Creating version {label} of {uri}")

        response = self._make_request(
            'POST', f"{uri}{APIConfig.VERSIONS_SUFFIX}", f'Create version {label} of {uri}',
            headers={'Slug': label},
        )
        self._handle_response(response, f'Create version {label} of {uri}')


def _retry_after(response: requests.Response, default: int) -> int:
    try:
        return int(response.headers.get('Retry-After', default))
    except (TypeError, ValueError):
        return default
