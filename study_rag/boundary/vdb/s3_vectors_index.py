"""
S3 Vectors index adapter for production retrieval.

Talks to Amazon S3 Vectors through the boto3 's3vectors' client. The index
must be created with cosine distance, the embedding dimension from
VectorStoreSettings, and 'content' declared as a non-filterable metadata key
(chunk text exceeds the filterable metadata size limit).

Metadata keys:
- Filterable: user_id, document_id, category, chunk_index
- Non-filterable: title, content

Dependencies: boto3
System role: Production vector index (S3 Vectors)
"""

import asyncio
import logging
from typing import Any

import boto3

from study_rag.boundary.vdb.vector_schemas import IndexMatch, VectorRecord

logger = logging.getLogger(__name__)


class S3VectorsIndex:
    """Async facade over the synchronous boto3 s3vectors client."""

    def __init__(
        self,
        vectors_bucket: str,
        index_name: str = "documents",
        region: str = "us-east-1",
        client: Any | None = None,
    ) -> None:
        """
        Initialize adapter.

        Args:
            vectors_bucket: S3 Vectors bucket name
            index_name: Index name within the bucket
            region: AWS region for S3 Vectors
            client: Pre-built boto3 client (created if None)

        Raises:
            ValueError: When vectors_bucket or index_name is empty
        """
        if not vectors_bucket:
            raise ValueError("vectors_bucket cannot be empty")
        if not index_name:
            raise ValueError("index_name cannot be empty")

        self._bucket = vectors_bucket
        self._index_name = index_name
        self._client = client or boto3.client("s3vectors", region_name=region)

    async def upsert(self, records: list[VectorRecord]) -> None:
        payload = [
            {
                "key": record.id,
                "data": {"float32": [float(v) for v in record.values]},
                "metadata": record.metadata,
            }
            for record in records
        ]
        await asyncio.to_thread(
            self._client.put_vectors,
            vectorBucketName=self._bucket,
            indexName=self._index_name,
            vectors=payload,
        )

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any],
    ) -> list[IndexMatch]:
        request: dict[str, Any] = {
            "vectorBucketName": self._bucket,
            "indexName": self._index_name,
            "queryVector": {"float32": [float(v) for v in vector]},
            "topK": top_k,
            "returnMetadata": True,
            "returnDistance": True,
        }
        if filter:
            request["filter"] = build_filter(filter)

        response = await asyncio.to_thread(self._client.query_vectors, **request)

        return [
            IndexMatch(
                id=item["key"],
                score=max(-1.0, min(1.0, 1.0 - float(item.get("distance", 1.0)))),
                metadata=item.get("metadata") or {},
            )
            for item in response.get("vectors", [])
        ]

    async def delete(self, filter: dict[str, Any]) -> int:
        keys: list[str] = []
        next_token: str | None = None
        while True:
            request: dict[str, Any] = {
                "vectorBucketName": self._bucket,
                "indexName": self._index_name,
                "returnMetadata": True,
            }
            if next_token:
                request["nextToken"] = next_token
            page = await asyncio.to_thread(self._client.list_vectors, **request)
            for item in page.get("vectors", []):
                metadata = item.get("metadata") or {}
                if all(metadata.get(k) == v for k, v in filter.items()):
                    keys.append(item["key"])
            next_token = page.get("nextToken")
            if not next_token:
                break

        # delete_vectors accepts at most 500 keys per call
        for start in range(0, len(keys), 500):
            await asyncio.to_thread(
                self._client.delete_vectors,
                vectorBucketName=self._bucket,
                indexName=self._index_name,
                keys=keys[start:start + 500],
            )

        logger.info(
            f"{__name__}:delete - Removed {len(keys)} vectors",
            extra={"bucket": self._bucket, "index": self._index_name},
        )
        return len(keys)


def build_filter(filter: dict[str, Any]) -> dict[str, Any]:
    """
    Translate a flat equality filter into S3 Vectors filter syntax.

    Args:
        filter: {key: value} pairs, all required to match

    Returns:
        dict: {"key": {"$eq": value}} or an "$and" of such clauses
    """
    clauses = [{key: {"$eq": value}} for key, value in filter.items()]
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}
