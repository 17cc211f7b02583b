"""
Shared FastAPI dependencies.
"""
from typing import Optional

from crudgen.core.config import settings
from crudgen.services.llm_oracle import Oracle, build_oracle_from_settings
from crudgen.services.skip_params import SkipParameters, load_skip_parameters
from crudgen.services.value_cache import ValueCache

# Process-wide cache: field values stay consistent across requests within the TTL
_value_cache = ValueCache()


def get_value_cache() -> ValueCache:
    return _value_cache


def get_oracle() -> Optional[Oracle]:
    return build_oracle_from_settings()


def get_skip_parameters() -> SkipParameters:
    return load_skip_parameters(settings.SKIP_PARAMS_PATH)
