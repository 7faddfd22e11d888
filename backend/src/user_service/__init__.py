"""User records API served from AWS Lambda and backed by DynamoDB."""
