"""
metrics.py - Application metrics for monitoring
"""
from prometheus_client import Counter, Histogram, generate_latest
from functools import wraps
import time

# Metrics definitions
request_count = Counter(
    'text_engine_requests_total',
    'Total requests',
    ['method', 'endpoint', 'status']
)

request_duration = Histogram(
    'text_engine_request_duration_seconds',
    'Request duration',
    ['method', 'endpoint']
)

pattern_operations = Counter(
    'text_engine_pattern_operations_total',
    'Pattern matching operations',
    ['operation']  # find, highlight, replace, detailed, registry
)

pattern_errors = Counter(
    'text_engine_pattern_errors_total',
    'Patterns rejected because they do not compile',
    ['operation']
)

batch_files = Counter(
    'text_engine_batch_files_total',
    'Files handled by batch processing',
    ['outcome']  # 'processed' or 'failed'
)

analysis_duration = Histogram(
    'text_engine_analysis_duration_seconds',
    'Text analysis duration',
    ['analysis']  # 'frequency' or 'summary'
)


def track_request(method: str, endpoint: str):
    """Decorator to track request metrics"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start = time.time()
            status = 200
            try:
                result = await func(*args, **kwargs)
                return result
            except Exception as e:
                status = getattr(e, "status_code", 500)
                raise
            finally:
                duration = time.time() - start
                request_count.labels(method, endpoint, status).inc()
                request_duration.labels(method, endpoint).observe(duration)
        return wrapper
    return decorator


def get_metrics():
    """Get Prometheus metrics"""
    return generate_latest()
