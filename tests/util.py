from authclients.applications import ApplicationManager
from authclients.applications import MemoryApplicationStore
from authclients.applications import PBKDF2SecretHasher
from authclients.applications import SecretCodec

#: keep hashing cheap in tests, the format is the same
TEST_ITERATIONS = 1000


def create_secret_codec():
    return SecretCodec(PBKDF2SecretHasher(iterations=TEST_ITERATIONS))


def create_manager(store=None, **kwargs):
    if store is None:
        store = MemoryApplicationStore()
    kwargs.setdefault("secret_codec", create_secret_codec())
    return ApplicationManager(store, **kwargs)
