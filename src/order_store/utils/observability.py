"""
Centralized observability utilities for the order store.

This module provides configured instances of AWS Lambda Powertools for logging,
tracing, and metrics collection shared by every layer of the package.

The store only records metrics; publishing them is the caller's job. Wrap the
Lambda entry point with ``@metrics.log_metrics`` or call
``metrics.flush_metrics()`` once per invocation, otherwise values below the
Powertools auto-flush threshold are never emitted.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Metrics namespace for order store KPIs
METRICS_NAMESPACE = 'OrderStore'

# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
logger: Logger = Logger()

# Disabled by setting POWERTOOLS_TRACE_DISABLED to "True"
tracer: Tracer = Tracer()

# Service dimension is taken from POWERTOOLS_SERVICE_NAME
metrics = Metrics(namespace=METRICS_NAMESPACE)
