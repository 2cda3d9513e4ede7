# auditlog/core/context.py

import contextvars

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
actor_id_ctx = contextvars.ContextVar("actor_id", default=None)
client_ip_ctx = contextvars.ContextVar("client_ip", default=None)
