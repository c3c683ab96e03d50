"""
authclients.common.urls
~~~~~~~~~~~~~~~~~~~~~~~

URI helpers used to check redirection endpoints registered by clients.
"""

import re
import urllib.parse as urlparse

SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
PERCENT_ENCODED_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

#: unreserved, reserved and "%" characters of RFC3986 section 2
URI_CHARACTERS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    "-._~:/?#[]@!$&'()*+,;=%"
)

#: schemes whose authority component may be empty, e.g. ``file:///tmp``
EMPTY_AUTHORITY_SCHEMES = ("file",)


def split_scheme(uri):
    scheme, sep, rest = uri.partition(":")
    if not sep or not SCHEME_RE.match(scheme):
        return None, uri
    return scheme, rest


def is_well_formed_uri(uri):
    """Check that ``uri`` is an absolute URI written in its escaped form.

    The value must start with a scheme, contain only characters allowed
    by :rfc:`3986` (anything else must be percent-encoded), use valid
    percent-encoded triplets, and carry a non-empty authority when the
    hierarchical ``//`` form is used::

        >>> is_well_formed_uri("https://client.example.com/cb")
        True
        >>> is_well_formed_uri("com.example.app:/oauth2redirect")
        True
        >>> is_well_formed_uri("/cb")
        False
        >>> is_well_formed_uri("https://client.example.com/a b")
        False
    """
    if not uri or not isinstance(uri, str):
        return False

    scheme, rest = split_scheme(uri)
    if scheme is None or not rest:
        return False

    if any(c not in URI_CHARACTERS for c in uri):
        return False

    if PERCENT_ENCODED_RE.search(uri):
        return False

    # only one fragment delimiter is allowed
    if uri.count("#") > 1:
        return False

    try:
        parsed = urlparse.urlsplit(uri)
        # accessing the port validates it
        parsed.port
    except ValueError:
        return False

    if rest.startswith("//") and not parsed.netloc:
        return scheme.lower() in EMPTY_AUTHORITY_SCHEMES
    return True


def has_fragment(uri):
    return bool(urlparse.urlsplit(uri).fragment)
