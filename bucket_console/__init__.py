"""Admin console for an S3 bucket with an SQS-fed log stream."""
