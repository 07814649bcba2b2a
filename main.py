from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from datetime import datetime, timezone
import os
import logging
import httpx
from dotenv import load_dotenv

from models.models import ChatReply, ChatRequest, PrescreenResult, ProgramOption, WidgetConfig, LANGUAGES
from db import Base, engine, get_db
from recommendation.ai.assistant import assistant
from recommendation.catalog.store import get_catalog_store
from recommendation.logic.contracts import PrescreenAnswers, RecommendationBundle
from recommendation.logic.runner import run_recommendation
from recommendation.models import RecDecisionLog
from recommendation.routes import router as recommendation_router
from utils.crm_bridge import CRMBridgeError, fetch_schedule_options, sync_conversation, trigger_prescreen_automation

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("enrollment_assistant")

app = FastAPI(title="Enrollment Assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendation_router)

Base.metadata.create_all(bind=engine)


async def _recommend(answers: PrescreenAnswers) -> RecommendationBundle:
    try:
        # A stale snapshot refreshes over the network under the store lock
        snapshot = await run_in_threadpool(get_catalog_store().get_snapshot)
    except Exception as e:
        logger.error(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=503, detail="Course catalog unavailable")
    return await run_recommendation(answers, snapshot, fetch_schedule_options)


def _log_decision(bundle: RecommendationBundle, answers: PrescreenAnswers) -> None:
    try:
        with get_db() as db:
            db.add(RecDecisionLog.from_bundle(bundle, answers))
    except Exception as e:
        logger.error(f"Failed to write decision log for {bundle.request_id}: {e}")


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}


@app.get("/config", response_model=WidgetConfig, tags=["meta"], summary="Widget languages and programs")
def widget_config():
    try:
        snapshot = get_catalog_store().get_snapshot()
        courses = sorted(snapshot.courses, key=lambda c: c.priority)
    except Exception as e:
        logger.error(f"Catalog unavailable for /config: {e}")
        courses = []
    programs = [ProgramOption(course_code=c.course_code, label=c.course_name, link=c.link) for c in courses]
    return WidgetConfig(languages=LANGUAGES, programs=programs)


@app.post("/prescreen", response_model=PrescreenResult, tags=["prescreen"], summary="Submit pre-screen answers")
async def submit_prescreen(answers: PrescreenAnswers):
    if not answers.certificate_goals:
        raise HTTPException(status_code=400, detail="At least one certificate goal is required")

    bundle = await _recommend(answers)

    payload = {
        "requestId": bundle.request_id,
        "language": answers.language,
        "certificateGoals": answers.certificate_goals,
        "availability": answers.availability.model_dump(mode="json", by_alias=True),
        "marketingConsent": answers.marketing_consent,
        "contact": answers.contact,
        "recommendedCourses": [c.course_code for c in bundle.match_outcome.courses],
        "requiresStaffHandoff": bundle.requires_staff_handoff,
        "submittedAt": datetime.now(timezone.utc).isoformat(),
    }
    try:
        automation = await trigger_prescreen_automation(payload)
    except (CRMBridgeError, httpx.HTTPError) as e:
        logger.error(f"Pre-screen automation failed for {bundle.request_id}: {e}")
        automation = {"ok": False, "error": str(e)}

    _log_decision(bundle, answers)
    return PrescreenResult(bundle=bundle, automation=automation)


@app.post("/chat", response_model=ChatReply, tags=["chat"], summary="Chat with the enrollment assistant")
async def chat(request: ChatRequest):
    bundle = await _recommend(request.prescreen)

    history = [turn.model_dump() for turn in request.history]
    reply = await run_in_threadpool(
        assistant.reply, request.message, bundle, request.prescreen.language, history
    )
    if reply is None:
        return JSONResponse(status_code=503, content={"error": "AI error"})

    try:
        await sync_conversation({
            "sessionId": request.session_id or bundle.request_id,
            "requestId": bundle.request_id,
            "contact": request.prescreen.contact,
            "message": request.message,
            "reply": reply,
            "recommendedCourses": [c.course_code for c in bundle.match_outcome.courses],
            "requiresStaffHandoff": bundle.requires_staff_handoff,
        })
    except (CRMBridgeError, httpx.HTTPError) as e:
        logger.warning(f"Conversation sync skipped for {bundle.request_id}: {e}")

    return ChatReply(reply=reply, bundle=bundle)
