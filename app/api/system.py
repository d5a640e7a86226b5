import time
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_cache, get_store
from app.core.cache import CacheStore
from app.core.exceptions import StoreError
from app.core.store import Store

router = APIRouter()


@router.get("/health")
async def health_check(
    store: Store = Depends(get_store), cache: CacheStore = Depends(get_cache)
):
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "components": {"api": "up", "database": "down"},
        "cached_keys": len(cache),
    }

    try:
        # Start a timer to measure latency
        start_time = time.perf_counter()

        await store.ping()

        end_time = time.perf_counter()

        health_status["components"]["database"] = "up"
        health_status["database_latency_ms"] = round((end_time - start_time) * 1000, 2)

    except StoreError as e:
        health_status["status"] = "unhealthy"
        health_status["error"] = e.message

        # return a 503 Service Unavailable so load balancers know we are down
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
