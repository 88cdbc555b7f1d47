"""Interface for the HTTP collaborator used by the services.

The core only needs one capability: fetch a resource by relative path as a
string. Connection pooling and base addresses belong to the implementation.
"""

import abc

from catfacts.domain.models.common import Payload, RelativePath


class HttpClient(abc.ABC):
    """Abstract Base Class for string-returning HTTP clients."""

    @abc.abstractmethod
    async def get_string(self, path: RelativePath) -> Payload:
        """Fetches the resource at `path` relative to the client's base URL.

        Raises:
            httpx.HTTPError: On transport failures or non-success status codes.
        """
        pass
