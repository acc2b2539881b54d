"""
Blob Storage Service

Uploads review photos, business logos and social cards to S3 (or any
S3-compatible endpoint) and builds their public URLs.
"""
import logging
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from flask import current_app

logger = logging.getLogger(__name__)

# Global S3 client (initialized on first use)
_s3_client = None


class StorageError(Exception):
    """An upload to blob storage failed."""


def get_s3_client():
    """Get or create the S3 client."""
    global _s3_client
    
    if _s3_client is not None:
        return _s3_client
    
    config = current_app.config
    try:
        _s3_client = boto3.client(
            's3',
            aws_access_key_id=config.get('AWS_ACCESS_KEY_ID'),
            aws_secret_access_key=config.get('AWS_SECRET_ACCESS_KEY'),
            region_name=config.get('AWS_REGION'),
            endpoint_url=config.get('S3_ENDPOINT_URL')
        )
        logger.info("S3 client initialized", extra={"region": config.get('AWS_REGION')})
        return _s3_client
    except (ClientError, BotoCoreError) as e:
        logger.error("Failed to initialize S3 client", extra={"error": str(e)})
        raise StorageError(f"Storage configuration error: {str(e)}")


def _object_exists(client, bucket, path):
    try:
        client.head_object(Bucket=bucket, Key=path)
        return True
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        if error_code in ('404', 'NoSuchKey', 'NotFound'):
            return False
        raise


def upload(bucket, path, data, content_type=None, overwrite=False):
    """
    Upload bytes to ``bucket/path``.
    
    Args:
        bucket: Bucket name
        path: Object key inside the bucket
        data: File content
        content_type: MIME type stored with the object
        overwrite: Replace an existing object at the same path
    
    Returns:
        str: The object path
    
    Raises:
        StorageError: If the object exists (and overwrite is False) or the upload fails
    """
    try:
        client = get_s3_client()
        if not overwrite and _object_exists(client, bucket, path):
            raise StorageError(f"Object already exists: {bucket}/{path}")
        
        extra = {'ContentType': content_type} if content_type else {}
        client.put_object(Bucket=bucket, Key=path, Body=data, **extra)
        logger.info("Uploaded object", extra={"bucket": bucket, "path": path, "size": len(data)})
        return path
    except (ClientError, BotoCoreError) as e:
        logger.error("Upload failed", extra={"bucket": bucket, "path": path, "error": str(e)})
        raise StorageError(f"Upload failed: {str(e)}")


def get_public_url(bucket, path):
    base = current_app.config['STORAGE_PUBLIC_URL'].format(bucket=bucket).rstrip('/')
    return f"{base}/{path}"


def file_extension(filename, default='bin'):
    """Extension after the last dot, lowercased."""
    if filename and '.' in filename:
        ext = filename.rsplit('.', 1)[1].lower()
        if ext:
            return ext
    return default
