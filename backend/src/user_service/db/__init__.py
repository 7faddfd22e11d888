"""Data access for user records stored in DynamoDB."""
