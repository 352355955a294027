# foodcourt/celery_worker.py
from celery import Celery

from foodcourt.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, REDIS_TIMEOUT_SECONDS

celery_app = Celery(
    "foodcourt",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

#register tasks explicitly
celery_app.conf.imports = (
    "foodcourt.services.email_service",
)

#publishing must not hang the request that queued the task:
#one connection attempt, bounded by REDIS_TIMEOUT_SECONDS
celery_app.conf.task_publish_retry = False
celery_app.conf.broker_connection_timeout = REDIS_TIMEOUT_SECONDS
celery_app.conf.broker_transport_options = {
    "max_retries": 0,
    "interval_start": 0,
    "interval_step": 0,
    "interval_max": 0,
    "socket_timeout": REDIS_TIMEOUT_SECONDS,
    "socket_connect_timeout": REDIS_TIMEOUT_SECONDS,
}
celery_app.conf.redis_socket_timeout = REDIS_TIMEOUT_SECONDS
celery_app.conf.redis_socket_connect_timeout = REDIS_TIMEOUT_SECONDS
celery_app.conf.result_backend_transport_options = {
    "retry_policy": {"max_retries": 0, "interval_start": 0, "interval_step": 0, "interval_max": 0},
}

celery_app.conf.timezone = "UTC"
