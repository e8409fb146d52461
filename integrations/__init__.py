"""
External collaborators of the summary pipeline.

This package contains:
- aws: boto3 client construction and retry policy for read-only calls
- storage: S3 object retrieval
- secrets: Secrets Manager credential lookup
- mailer: SMTP delivery of the rendered report
"""
