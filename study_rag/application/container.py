"""
Service container.

Lazily builds and caches the long-lived collaborators (embeddings, vector
index, chat model adapter, database engine) and wires the application
services from Settings.

Dependencies: study_rag.configs, study_rag.boundary, study_rag.core
System role: Composition root
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from langchain_core.embeddings import Embeddings

from study_rag.application.services.job_service import JobService
from study_rag.application.services.processing_service import DocumentProcessingService
from study_rag.application.services.query_service import StudyQueryService
from study_rag.application.services.scheduler import TaskScheduler
from study_rag.boundary.db.connection import create_tables, get_async_engine, get_async_session_factory
from study_rag.boundary.db.document_store import SqlDocumentStore, SqlJobStore
from study_rag.boundary.llm.generative_model import GenerativeModel, LangChainGenerativeModel
from study_rag.boundary.processing.processing_client import ProcessingClient
from study_rag.boundary.vdb.vector_index_factory import build_index_gateway
from study_rag.configs import Settings, get_settings
from study_rag.core.agentic_system.answer import AnswerGenerator, ModelRouter
from study_rag.core.document_processing.entrypoint import IngestionPipeline
from study_rag.core.document_processing.tasks import ChunkingTask, EmbeddingGateway, TextExtractor
from study_rag.core.extraction import StructuredExtractor
from study_rag.core.reranker import Reranker
from study_rag.core.retriever import Retriever
from study_rag.evaluation.evaluators import AnswerReviewer
from study_rag.observability import configure_logging

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Container for cached service instances."""

    def __init__(
        self,
        settings: Settings | None = None,
        model: GenerativeModel | None = None,
        embeddings: Embeddings | None = None,
    ):
        self.settings = settings or get_settings()
        self._model = model
        self._embeddings = embeddings
        self._embedding_gateway = None
        self._index_gateway = None
        self._session_factory = None
        self._engine = None
        self._scheduler = None
        self._processing_client = None

    @property
    def model(self) -> GenerativeModel:
        if self._model is None:
            self._model = LangChainGenerativeModel()
        return self._model

    @property
    def embedding_gateway(self) -> EmbeddingGateway:
        if self._embedding_gateway is None:
            vs = self.settings.vector_store
            provider = self._embeddings
            if provider is None:
                from study_rag.core.document_processing.embeddings_wrapper import FixedDimensionEmbeddings

                provider = FixedDimensionEmbeddings(
                    model=vs.embedding_model,
                    output_dimensionality=vs.embedding_dimension,
                )
            self._embedding_gateway = EmbeddingGateway(
                provider,
                max_input_chars=self.settings.pipeline.max_embedding_chars,
                expected_dimension=vs.embedding_dimension,
            )
        return self._embedding_gateway

    @property
    def index_gateway(self):
        if self._index_gateway is None:
            self._index_gateway = build_index_gateway(self.settings.vector_store)
        return self._index_gateway

    @property
    def session_factory(self):
        if self._session_factory is None:
            self._engine = get_async_engine(self.settings.database)
            self._session_factory = get_async_session_factory(self._engine)
        return self._session_factory

    @property
    def scheduler(self) -> TaskScheduler:
        if self._scheduler is None:
            self._scheduler = TaskScheduler()
        return self._scheduler

    @property
    def processing_client(self) -> ProcessingClient:
        if self._processing_client is None:
            self._processing_client = ProcessingClient.from_settings(self.settings.processing)
        return self._processing_client

    def retriever(self) -> Retriever:
        return Retriever(self.embedding_gateway, self.index_gateway)

    def answer_generator(self) -> AnswerGenerator:
        gen = self.settings.generation
        router = ModelRouter(gen.profiles, long_question_chars=gen.long_question_chars)
        reviewer = AnswerReviewer(self.model, gen.review_profile, fail_open=gen.review_fail_open)
        return AnswerGenerator(
            self.model,
            router,
            reviewer,
            max_attempts=gen.max_attempts,
            max_context_length=gen.max_context_length,
            temperature_step=gen.temperature_step,
            token_growth=gen.token_growth,
        )

    def query_service(self) -> StudyQueryService:
        """Question answering over a user's documents."""
        gen = self.settings.generation
        reranker = Reranker(self.model, gen.rerank_profile, preview_chars=gen.rerank_preview_chars)
        return StudyQueryService(self.retriever(), reranker, self.answer_generator())

    def job_service(self) -> JobService:
        return JobService(SqlJobStore(self.session_factory))

    def processing_service(self) -> DocumentProcessingService:
        """Upload orchestration wired to the configured backends."""
        pipeline = IngestionPipeline(
            ChunkingTask(max_chunk_size=self.settings.pipeline.max_chunk_size),
            self.embedding_gateway,
            self.index_gateway,
        )
        extractor = StructuredExtractor(self.retriever(), self.model, self.settings.extraction)
        return DocumentProcessingService(
            store=SqlDocumentStore(self.session_factory),
            processing_client=self.processing_client,
            text_extractor=TextExtractor(),
            ingestion_pipeline=pipeline,
            extractor=extractor,
            job_service=self.job_service(),
            index_gateway=self.index_gateway,
            settings=self.settings.processing,
            scheduler=self.scheduler,
        )

    async def aclose(self) -> None:
        """Cancel pending analysis passes and release network and database resources."""
        logger.info(f"{__name__}:aclose - Shutting down service container")
        if self._scheduler is not None:
            await self._scheduler.shutdown()
        if self._processing_client is not None:
            await self._processing_client.aclose()
        if self._engine is not None:
            await self._engine.dispose()

    async def init_database(self) -> None:
        """Create the document and job tables on the configured database."""
        self.session_factory
        await create_tables(self._engine)
        logger.info(f"{__name__}:init_database - Tables ready")


@asynccontextmanager
async def service_container(
    settings: Settings | None = None,
    model: GenerativeModel | None = None,
    embeddings: Embeddings | None = None,
) -> AsyncIterator[ServiceContainer]:
    """
    Application lifespan.

    Configures logging, creates the database tables and yields a wired
    container. Pending analysis passes and open connections are released on
    exit.

    Usage:
        async with service_container() as services:
            processing = services.processing_service()
            outcome = await processing.process_document(UploadRequest(...))
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    logger.info(f"{__name__}:service_container - Startup: logging configured")

    container = ServiceContainer(settings, model=model, embeddings=embeddings)
    try:
        await container.init_database()
        yield container
    finally:
        await container.aclose()
        logger.info(f"{__name__}:service_container - Shutdown complete")
