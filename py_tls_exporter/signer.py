import datetime
import hashlib
import hmac
from typing import Dict
from typing import Mapping
from typing import Optional
from urllib.parse import parse_qsl
from urllib.parse import quote
from urllib.parse import urlsplit


ALGORITHM = "HMAC-SHA256"
SERVICE = "TLS"

_DATE_FORMAT = "%Y%m%d"
_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"


def _hmac_sha256(key: bytes, content: str) -> bytes:
    return hmac.new(key, content.encode("utf-8"), hashlib.sha256).digest()


def _sha256_hex(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def _quote(value: str) -> str:
    return quote(value, safe="-_.~")


def canonical_query_string(query: str) -> str:
    # The query arrives urlencoded, decode it before quoting again.
    pairs = [
        (_quote(key), _quote(value))
        for key, value in parse_qsl(query, keep_blank_values=True)
    ]
    return "&".join(f"{key}={value}" for key, value in sorted(pairs))


def signing_key(secret_key: str, date: str, region: str, service: str) -> bytes:
    k_date = _hmac_sha256(secret_key.encode("utf-8"), date)
    k_region = _hmac_sha256(k_date, region)
    k_service = _hmac_sha256(k_region, service)
    return _hmac_sha256(k_service, "request")


def sign_request(
    method: str,
    url: str,
    headers: Mapping[str, str],
    body: bytes,
    access_key: str,
    secret_key: str,
    region: str,
    service: str = SERVICE,
    now: Optional[datetime.datetime] = None,
) -> Dict[str, str]:
    """Signs a request with Volcengine's HMAC-SHA256 scheme.

    :param method: HTTP method.
    :type method: str
    :param url: full request url, query string included.
    :type url: str
    :param headers: headers that will be sent. All of them get signed.
    :type headers: dict
    :param body: request body.
    :type body: bytes
    :param access_key: Volcengine access key.
    :param secret_key: Volcengine secret key. Never logged.
    :param region: Volcengine region, part of the credential scope.
    :param service: signed service name.
    :param now: signing time, defaults to the current UTC time.
    :type now: datetime.datetime
    :returns: the given headers plus Host, X-Date, X-Content-Sha256 and
        Authorization.
    :rtype: dict
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    x_date = now.strftime(_DATETIME_FORMAT)
    short_date = now.strftime(_DATE_FORMAT)
    payload_hash = _sha256_hex(body)

    split_url = urlsplit(url)
    signed = dict(headers)
    signed["Host"] = split_url.netloc
    signed["X-Date"] = x_date
    signed["X-Content-Sha256"] = payload_hash

    canonical_headers = {
        key.lower(): " ".join(value.split()) for key, value in signed.items()
    }
    signed_headers = ";".join(sorted(canonical_headers))
    canonical_request = "\n".join(
        [
            method.upper(),
            split_url.path or "/",
            canonical_query_string(split_url.query),
            "".join(
                f"{key}:{canonical_headers[key]}\n" for key in sorted(canonical_headers)
            ),
            signed_headers,
            payload_hash,
        ]
    )

    credential_scope = f"{short_date}/{region}/{service}/request"
    string_to_sign = "\n".join(
        [
            ALGORITHM,
            x_date,
            credential_scope,
            _sha256_hex(canonical_request.encode("utf-8")),
        ]
    )
    signature = hmac.new(
        signing_key(secret_key, short_date, region, service),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

    signed["Authorization"] = (
        f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )
    return signed
