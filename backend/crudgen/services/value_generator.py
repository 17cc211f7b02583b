"""
Single-field value generation: cache, oracle with bounded retries, fallback.
"""
import logging
import time
from typing import Any, Callable, Optional

from crudgen.core.config import settings
from crudgen.core.exceptions import OracleError, OracleResponseError
from crudgen.core.monitoring import oracle_requests_total
from crudgen.services.fallback import FallbackValueGenerator
from crudgen.services.llm_oracle import Oracle, build_oracle_from_settings, build_value_prompt, extract_generated_value
from crudgen.services.results import ABSENT, Ok, Outcome, Retryable
from crudgen.services.schema_types import SchemaNode, schema_from_dict
from crudgen.services.schema_validator import check_value
from crudgen.services.uniqueness import derive_unique_value
from crudgen.services.value_cache import ValueCache, cache_key, unique_cache_key

logger = logging.getLogger(__name__)

_MISS = object()


class ValueGenerator:
    """Produce one realistic value per (field, schema, index)."""
    
    def __init__(
        self,
        cache: ValueCache,
        oracle: Optional[Oracle] = None,
        fallback: Optional[FallbackValueGenerator] = None,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the generator.
        
        Args:
            cache: Base/unique value cache shared by every operation
            oracle: LLM oracle; None skips straight to the fallback
            fallback: Deterministic generator used after failed attempts
            max_attempts: Oracle attempts per base value
            retry_delay: Seconds to wait between oracle attempts
            sleep: Sleep function, replaceable in tests
        """
        self.cache = cache
        self.oracle = oracle
        self.fallback = fallback or FallbackValueGenerator()
        self.max_attempts = settings.ORACLE_MAX_ATTEMPTS if max_attempts is None else max_attempts
        self.retry_delay = settings.ORACLE_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
        self._sleep = sleep
    
    def generate(self, field_name: str, schema: Any, required: bool, index: int = 0) -> Any:
        """
        Get the value of ``field_name`` for batch position ``index``.
        
        Index 0 is the base value; higher indices are derived from it.
        Returns ``ABSENT`` when an optional field should be left out.
        """
        schema = schema_from_dict(schema)
        
        unique_key = unique_cache_key(field_name, schema, index)
        cached = self.cache.get_unique(unique_key, _MISS)
        if cached is not _MISS and not (required and cached is ABSENT):
            return cached
        
        base_key = cache_key(field_name, schema)
        base_value = self.cache.get_base(base_key, _MISS)
        # an optional use of the same field may have cached it as left out
        if base_value is _MISS or (required and base_value is ABSENT):
            base_value = self._generate_base_value(field_name, schema, required)
            self.cache.set_base(base_key, base_value)
        
        if index == 0:
            value = base_value
        else:
            value = derive_unique_value(base_value, schema.type, schema, index)
        
        self.cache.set_unique(unique_key, value)
        return value
    
    def _generate_base_value(self, field_name: str, schema: SchemaNode, required: bool) -> Any:
        if self.oracle is None:
            return self.fallback.generate(field_name, schema, required)
        
        prompt = build_value_prompt(field_name, schema.type, required, schema.to_dict())
        for attempt in range(1, self.max_attempts + 1):
            outcome = self._request_value(prompt, field_name, schema, required)
            if isinstance(outcome, Ok):
                return outcome.value
            logger.warning(
                f"Attempt {attempt}/{self.max_attempts}: could not generate value for {field_name}: {outcome.reason}"
            )
            if attempt < self.max_attempts and self.retry_delay > 0:
                self._sleep(self.retry_delay)
        
        logger.warning(f"Oracle gave no valid value for {field_name}; using fallback")
        return self.fallback.generate(field_name, schema, required)
    
    def _request_value(self, prompt: str, field_name: str, schema: SchemaNode, required: bool) -> Outcome:
        try:
            raw = self.oracle.invoke(prompt)
            value = extract_generated_value(raw, field_name)
        except OracleResponseError as e:
            oracle_requests_total.labels(outcome="rejected").inc()
            return Retryable(str(e))
        except (OracleError, OSError) as e:
            oracle_requests_total.labels(outcome="error").inc()
            return Retryable(str(e))
        except Exception as e:
            logger.error(f"Unexpected oracle failure for {field_name}: {e}", exc_info=True)
            oracle_requests_total.labels(outcome="error").inc()
            return Retryable(f"unexpected oracle failure: {e}")
        
        errors = check_value(value, schema, required)
        if errors:
            oracle_requests_total.labels(outcome="rejected").inc()
            return Retryable(f"value {value!r} rejected: {'; '.join(errors)}")
        
        oracle_requests_total.labels(outcome="accepted").inc()
        return Ok(value)


def build_value_generator(cache: ValueCache, oracle: Optional[Oracle] = None, use_settings_oracle: bool = True) -> ValueGenerator:
    """Generator wired from settings; ``oracle`` overrides the configured one."""
    if oracle is None and use_settings_oracle:
        oracle = build_oracle_from_settings()
    return ValueGenerator(cache=cache, oracle=oracle)
