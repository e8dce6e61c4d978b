# src/core/cache.py
import hashlib
import inspect
import json
from functools import wraps
from typing import Optional, Callable, Any, Tuple
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
from fastapi_cache.coder import JsonCoder
from redis import asyncio as aioredis
from asyncio import sleep
from utils.logger import setup_logger
from core.config import settings

logger = setup_logger("REDIS CACHE")

CACHE_PREFIX = "dental_clinic"

# Namespace of every cached aggregate read
REPORTS_NAMESPACE = "reports"


async def init_cache() -> str:
    """Initialize the cache backend; returns "redis" or "memory".

    Falls back to an in-process backend when Redis is unreachable, unless
    REQUIRE_REDIS is set or several workers serve the app.
    """
    try:
        redis = aioredis.from_url(
            settings.REDIS_CACHE_URL,
            password=settings.REDIS_PASSWORD or None,
            encoding="utf8",
            decode_responses=False,
            socket_timeout=5,
            socket_keepalive=True,
            retry_on_timeout=True,
            max_connections=20,
        )

        # Test connection with retry
        for _ in range(3):
            try:
                if await redis.ping():
                    break
            except Exception as e:
                logger.warning(f"Redis ping attempt failed: {str(e)}")
                await sleep(0.5)
        else:
            raise ConnectionError("Redis ping failed after 3 attempts")

        FastAPICache.init(
            EnhancedRedisBackend(redis),
            prefix=CACHE_PREFIX,
            coder=JsonCoder,
            expire=settings.CACHE_EXPIRE_SECONDS,
            enable=settings.CACHE_ENABLED,
        )
        logger.info("Redis cache initialized successfully")
        return "redis"

    except Exception as e:
        if settings.SHARED_CACHE_REQUIRED:
            logger.error(f"Redis connection failed: {str(e)}", exc_info=True)
            raise RuntimeError(f"Redis connection failed: {str(e)}")
        logger.warning(f"Redis unavailable ({e}); using in-memory cache")
        init_memory_cache()
        return "memory"


def init_memory_cache() -> None:
    FastAPICache.init(
        InMemoryBackend(),
        prefix=CACHE_PREFIX,
        coder=JsonCoder,
        expire=settings.CACHE_EXPIRE_SECONDS,
        enable=settings.CACHE_ENABLED,
    )


class EnhancedRedisBackend(RedisBackend):
    """Redis backend that prefixes keys and never lets a cache error fail a request"""

    def __init__(self, redis):
        self.redis = redis
        self._default_ttl = settings.CACHE_EXPIRE_SECONDS

    def _full_key(self, key: str) -> str:
        prefix = FastAPICache.get_prefix()
        return f"{prefix}:{key}" if prefix else key

    async def get_with_ttl(self, key: str) -> Tuple[int, Optional[bytes]]:
        full_key = self._full_key(key)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.ttl(full_key)
                pipe.get(full_key)
                ttl, value = await pipe.execute()
                return ttl, value
        except Exception as e:
            logger.error(f"Error getting value with TTL: {str(e)}")
            return 0, None

    async def get(self, key: str) -> Optional[bytes]:
        full_key = self._full_key(key)
        try:
            return await self.redis.get(full_key)
        except Exception as e:
            logger.error(f"Error getting cache value: {str(e)}")
            return None

    async def set(self, key: str, value: bytes, expire: Optional[int] = None) -> None:
        full_key = self._full_key(key)
        try:
            await self.redis.set(full_key, value, ex=expire or self._default_ttl)
        except Exception as e:
            logger.error(f"Error setting cache value: {str(e)}")

    async def clear(
        self, namespace: Optional[str] = None, key: Optional[str] = None
    ) -> int:
        try:
            if namespace:
                keys = await self.redis.keys(f"{self._full_key(namespace)}:*")
                if keys:
                    await self.redis.delete(*keys)
                return len(keys)
            elif key:
                await self.redis.delete(self._full_key(key))
                return 1
            return 0
        except Exception as e:
            logger.error(f"Error clearing cache: {str(e)}")
            return 0


def _active_backend():
    """The configured backend, or None before init or when caching is off"""
    try:
        backend = FastAPICache.get_backend()
    except AssertionError:
        return None
    if not FastAPICache.get_enable():
        return None
    return backend


def _build_cache_key(
    func: Callable, namespace: str, ignore_args: Optional[list], *args, **kwargs
) -> str:
    """Hash of the call arguments, skipping sessions and other ignored values"""
    bound = inspect.signature(func).bind(*args, **kwargs)
    bound.apply_defaults()

    serializable_args = {}
    for name, value in bound.arguments.items():
        if name == "self" or (ignore_args and name in ignore_args):
            continue
        try:
            json.dumps(value)
            serializable_args[name] = value
        except (TypeError, ValueError):
            serializable_args[name] = str(value)

    args_hash = hashlib.md5(
        json.dumps(serializable_args, sort_keys=True).encode()
    ).hexdigest()
    return f"{namespace}:{func.__qualname__}:{args_hash}"


def advanced_cache(
    namespace: str,
    expire: Optional[int] = None,
    ignore_args: Optional[list] = None,
):
    """Cache an async function's JSON-serializable result under ``namespace``"""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            backend = _active_backend()
            if backend is None:
                return await func(*args, **kwargs)

            cache_key = _build_cache_key(func, namespace, ignore_args, *args, **kwargs)
            coder = FastAPICache.get_coder()

            try:
                cached = await backend.get(cache_key)
                if cached is not None:
                    logger.debug(f"Cache hit for {cache_key}")
                    return coder.decode(cached)
            except Exception as e:
                logger.warning(f"Cache read error for {cache_key}: {str(e)}")

            result = await func(*args, **kwargs)

            try:
                await backend.set(
                    cache_key,
                    coder.encode(result),
                    expire=expire or FastAPICache.get_expire(),
                )
            except Exception as e:
                logger.error(f"Cache write error for {cache_key}: {str(e)}")

            return result

        return wrapper

    return decorator


async def invalidate_namespace(namespace: str = REPORTS_NAMESPACE) -> None:
    """Drop every cached entry of a namespace after a mutation"""
    backend = _active_backend()
    if backend is None:
        return
    try:
        await backend.clear(namespace=namespace)
        logger.debug(f"Cache namespace cleared: {namespace}")
    except Exception as e:
        logger.error(f"Cache invalidation failed for {namespace}: {str(e)}")
