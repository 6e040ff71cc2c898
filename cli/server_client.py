"""HTTP client for communicating with the file host."""

import mimetypes
import os
import sys
import time
import uuid
from pathlib import Path
from typing import Callable, Optional

import httpx

from common.logging_config import get_logger
from cli.config import Config
from cli.constants import GREEN, RESET
from cli.utils import filename_from_disposition, format_file_size

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
IDEMPOTENT_METHODS = ("GET", "HEAD")


class ServerClient:
    """HTTP client for the file host API with retry logic and error handling."""

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize server client.

        Args:
            config: Configuration instance
            transport: Optional httpx transport (tests pass a MockTransport)
            sleep: Function used to wait between retries
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            transport=transport,
        )
        self.sleep = sleep
        self.request_id = None
        logger.info(f"Initialized ServerClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, file_size: int) -> float:
        """
        Calculate timeout for upload based on file size.

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        base_timeout = 30.0
        size_mb = file_size / (1024 * 1024)
        return base_timeout + size_mb * 0.1

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        A request that never reached the server (connection refused or
        connect timeout) is retried for every method. Read timeouts and 5xx
        responses are retried for GET only, and only when the server did
        not answer with one of its own error codes. Uploads and deletes are
        never sent twice once the server may have acted on them.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']
        idempotent = method.upper() in IDEMPOTENT_METHODS

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})
        kwargs['headers']['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                    )
                    return response

                if (
                    response.status_code >= 500
                    and idempotent
                    and self._error_code(response) is None
                    and attempt < max_retries
                ):
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    self.sleep(delay)
                    continue

                if response.status_code >= 500:
                    logger.error(
                        f"Server error: {method} {endpoint} status={response.status_code} "
                        f"code={self._error_code(response)} [request_id={self.request_id}]"
                    )
                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                not_sent = isinstance(e, (httpx.ConnectError, httpx.ConnectTimeout))
                if (not_sent or idempotent) and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    self.sleep(delay)
                    continue
                logger.error(
                    f"Network error (not retried): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )
                break

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        if isinstance(last_exception, httpx.ConnectError):
            raise ConnectionError("Cannot connect to the file host. Is it running?")
        raise ConnectionError("Max retries exceeded")

    def _error_code(self, response: httpx.Response) -> Optional[str]:
        """Error code set by the file host, or None for bodies it did not produce."""
        try:
            body = response.json()
        except ValueError:
            return None
        return body.get('code') if isinstance(body, dict) else None

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        # server messages for these already tell the user what to do
        if code in ('INVALID_INPUT', 'QUOTA_EXCEEDED', 'HOST_STORAGE_FULL'):
            return detail

        error_messages = {
            'RATE_LIMITED': 'Too many uploads. Wait a minute and try again.',
            'INFECTED': 'The file was flagged by the antivirus scanner and was not stored.',
            'SCAN_UNAVAILABLE': 'The antivirus scanner is unavailable. Please try again later.',
            'FILE_NOT_FOUND': 'File not found on server.',
            'CLIENT_NOT_FOUND': 'You have no data stored on this server.',
            'CORRUPTION': 'The server found an inconsistency for this file. Please report it.',
            'STORAGE_ERROR': 'The server could not access its storage. Please try again later.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            404: 'Not found',
            413: 'File too large',
            429: 'Too many requests',
            500: 'Server error',
            503: 'Service unavailable',
            507: 'Insufficient storage',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def _format_record(self, record: dict, include_private: bool = True) -> str:
        lines = [
            f"  Name:       {record['name']}",
            f"  Size:       {format_file_size(record['size'])}",
            f"  Public ID:  {record['public_id']}",
        ]
        if include_private:
            lines.append(f"  Private ID: {record['private_id']}")
        lines.append(f"  Expires:    {record['expires_at']}")
        return "\n".join(lines)

    def upload(self, file_path: str, email: str = "") -> str:
        """
        Upload one file.

        Args:
            file_path: Path of the local file
            email: Optional contact email stored with the file

        Returns:
            Result message with the identifiers of the stored file
        """
        path = Path(file_path).expanduser()

        if not path.exists():
            return f"Error: File not found: {file_path}"
        if not path.is_file():
            return f"Error: Not a file: {file_path}"

        file_size = path.stat().st_size
        if file_size == 0:
            return f"Error: File is empty: {file_path}"

        filename = path.name
        content_type = mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE
        logger.info(f"Uploading {filename} ({file_size} bytes, {content_type})")

        try:
            content = path.read_bytes()
            sys.stdout.write(f"Uploading {filename}: {format_file_size(file_size)}\n")
            sys.stdout.flush()

            response = self._request_with_retry(
                'POST',
                '/files',
                files={'file': (filename, content, content_type)},
                data={'email': email} if email else None,
                timeout=self._calculate_upload_timeout(file_size),
            )

            if response.status_code == 201:
                record = response.json()['data']
                return (
                    f"{GREEN}File saved successfully{RESET}\n"
                    f"{self._format_record(record)}\n"
                    f"Keep the private id: it is required to delete the file."
                )
            if response.status_code == 409:
                record = response.json().get('data') or {}
                return (
                    f"You already uploaded this file.\n"
                    f"{self._format_record(record)}"
                )
            return f"Upload failed: {self._format_error(response)}"

        except ConnectionError as e:
            logger.error(f"Connection error during upload: {e}")
            return f"Error: {e}"
        except OSError as e:
            return f"Error reading file: {e}"

    def download(self, public_id: str, output_path: Optional[str] = None) -> str:
        """
        Download a file by public id with progress feedback.

        Args:
            public_id: Public identifier of the file
            output_path: Optional destination file or directory (defaults to the
                current directory and the name the server sends)

        Returns:
            Success message with download details
        """
        try:
            with self.session.stream('GET', f'/files/{public_id}/download') as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error: {self._format_error(response)}"

                filename = (
                    filename_from_disposition(response.headers.get('Content-Disposition'))
                    or public_id
                )
                output_file = self._resolve_output_path(output_path, filename)

                total_size = int(response.headers.get('Content-Length', 0))
                downloaded = 0

                with open(output_file, 'wb') as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
                        downloaded += len(chunk)
                        if total_size > 0:
                            progress = (downloaded / total_size) * 100
                            sys.stdout.write(
                                f"\rDownloading {filename}: {format_file_size(downloaded)} / {format_file_size(total_size)} ({GREEN}{progress:.1f}%{RESET})"
                            )
                            sys.stdout.flush()

                sys.stdout.write('\n')
                sys.stdout.flush()

                return f"Downloaded: {filename} ({format_file_size(downloaded)})\nSaved to: {output_file.absolute()}"

        except httpx.ConnectError:
            return "Error: Cannot connect to the file host. Is it running?"
        except httpx.TimeoutException:
            return "Error: Request timed out. Server may be overloaded."
        except OSError as e:
            return f"Error writing file: {e}"

    def _resolve_output_path(self, output_path: Optional[str], filename: str) -> Path:
        if not output_path:
            return Path(os.getcwd()) / filename

        output_file = Path(output_path).expanduser()
        if output_file.is_dir():
            output_file = output_file / filename
        output_file.parent.mkdir(parents=True, exist_ok=True)
        return output_file

    def delete(self, private_id: str) -> str:
        try:
            response = self._request_with_retry('DELETE', f'/files/{private_id}')
            if response.status_code == 200:
                return response.json()['message']
            return f"Delete failed: {self._format_error(response)}"
        except ConnectionError as e:
            logger.error(f"Connection error during delete: {e}")
            return f"Error: {e}"

    def info(self, private_id: str) -> str:
        try:
            response = self._request_with_retry('GET', '/files/info', params={'private_id': private_id})
            if response.status_code == 200:
                return self._format_record(response.json()['data'])
            return f"Error: {self._format_error(response)}"
        except ConnectionError as e:
            logger.error(f"Connection error during info: {e}")
            return f"Error: {e}"

    def me(self) -> str:
        """
        Show the caller's ledger entry.

        Returns:
            Usage summary: file count, used and remaining space, expiry
        """
        try:
            response = self._request_with_retry('GET', '/clients/me')
            if response.status_code != 200:
                return f"Error: {self._format_error(response)}"

            data = response.json()
            lines = [
                f"Files:     {data['files_count']}",
                f"Used:      {format_file_size(data['used_bytes'])}",
                f"Remaining: {format_file_size(data['remaining_bytes'])}",
                f"Expires:   {data['expires_at']}",
            ]
            lines.extend(f"  - {public_id}" for public_id in data['files'])
            return "\n".join(lines)
        except ConnectionError as e:
            logger.error(f"Connection error fetching client record: {e}")
            return f"Error: {e}"

    def erase(self) -> str:
        try:
            response = self._request_with_retry('DELETE', '/clients/me')
            if response.status_code == 200:
                return response.json()['message']
            return f"Erase failed: {self._format_error(response)}"
        except ConnectionError as e:
            logger.error(f"Connection error during erase: {e}")
            return f"Error: {e}"

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
