"""Application lifespan: startup and shutdown.

Builds the process-wide context objects (Firestore client, identity
provider, audit emitter) once and stores them on app.state; request
handlers receive them through dependencies in firmspace.api.v1.dependencies.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.core.config import Settings, get_settings
from firmspace.infrastructure.audit import LoggingAuditSink
from firmspace.infrastructure.firebase import create_firestore_client
from firmspace.infrastructure.firebase._rest_client import FirestoreRESTClient
from firmspace.infrastructure.firebase.repositories import FirestoreEntityRepository
from firmspace.infrastructure.firebase.services import FirestoreAuditSink
from firmspace.infrastructure.identity import create_identity_provider
from firmspace.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


def build_audit_sink(settings: Settings, client: FirestoreRESTClient):
    """Return the audit sink selected by AUDIT_SINK."""
    if settings.audit_sink == "firestore":
        return FirestoreAuditSink(client, settings.audit_collection)
    return LoggingAuditSink()


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Shutdown order: drain pending audit deliveries, then close the
    identity and Firestore HTTP clients.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    firestore = create_firestore_client(settings)
    identity = create_identity_provider(settings)
    app.state.firestore = firestore
    app.state.repository = FirestoreEntityRepository(firestore)
    app.state.identity_provider = identity
    app.state.audit_emitter = AuditEmitter(build_audit_sink(settings, firestore))
    logger.info(
        "%s %s started (project %s, audit sink %s)",
        settings.app_name,
        settings.app_version,
        firestore.project_id,
        settings.audit_sink,
    )

    yield

    # ---- Shutdown ----
    await app.state.audit_emitter.drain()
    await identity.aclose()
    await firestore.aclose()
    logger.info("HTTP clients closed")
