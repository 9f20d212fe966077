from tests.fixtures.store_fixtures import (  # noqa: F401
    populated_store,
    recording_assertion,
    reset_typedconf_logger,
    store
)
