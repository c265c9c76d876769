import base64

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from imagebuilder.core._log_helper import warn
from imagebuilder.core.exceptions import CredentialEncodingError

from ._models import RegistryAuth


def encode_registry_auth(
    username: str,
    password: str,
    server_address: str,
    strict: bool = False,
) -> str:
    """Encode push credentials as an ``X-Registry-Auth`` token.

    The token is the URL-safe base64 of the JSON auth object. Empty
    fields are omitted, which is what the daemon expects for anonymous
    pushes. The token is not validated locally.

    Args:
        username: Registry user, may be empty.
        password: Registry password, may be empty.
        server_address: Registry address the credentials belong to.
        strict: Raise when the credentials cannot be encoded. When
            False the failure is logged and an empty token is
            returned, and the push proceeds without credentials.

    Returns:
        Encoded token.
    """
    try:
        auth = RegistryAuth(
            username=username,
            password=password,
            server_address=server_address,
        )
        payload = auth.model_dump_json(by_alias=True, exclude_defaults=True)
    except (ValidationError, PydanticSerializationError) as e:
        if strict:
            raise CredentialEncodingError(
                f"error encoding credentials for {server_address}",
                operation="push",
                target=server_address,
            ) from e
        warn(
            "Unable to encode credentials for %s, pushing without them",
            server_address,
        )
        payload = ""
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
