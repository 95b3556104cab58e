"""Prometheus metrics for the document service.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Upload metrics
uploads_total = Counter(
    "documents_uploads_total",
    "Total number of upload attempts",
    ["status"]  # status: created|deduplicated|error
)

# Authentication workflow metrics
authentication_requests_total = Counter(
    "documents_authentication_requests_total",
    "Authentication requests sent to the external service",
    ["status"]  # status: success|error
)

authentication_completions_total = Counter(
    "documents_authentication_completions_total",
    "Authentication results applied to documents",
    ["result"]  # result: authenticated|rejected|duplicate|skipped
)

# Access grant metrics
presigned_urls_issued_total = Counter(
    "documents_presigned_urls_issued_total",
    "Pre-signed URLs generated",
    ["purpose"]  # purpose: authentication|transfer|read
)

# Retention metrics
documents_deleted_total = Counter(
    "documents_deleted_total",
    "Document records deleted",
    ["mode"]  # mode: single|owner
)

blob_delete_failures_total = Counter(
    "documents_blob_delete_failures_total",
    "Blob deletions that failed after the record was removed (orphaned blobs)"
)

# Broker metrics
messages_published_total = Counter(
    "documents_messages_published_total",
    "Messages published to the broker",
    ["queue", "status"]  # status: success|error
)

messages_consumed_total = Counter(
    "documents_messages_consumed_total",
    "Messages consumed from the broker",
    ["queue", "outcome"]  # outcome: ack|reject|requeue
)

# Storage metrics
storage_operation_duration_seconds = Histogram(
    "documents_storage_operation_duration_seconds",
    "Time spent on object storage calls in seconds",
    ["operation"],  # operation: put|delete|presign
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)
