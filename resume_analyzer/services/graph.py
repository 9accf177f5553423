from typing import TypedDict

from langgraph.graph import END, StateGraph

from resume_analyzer.helpers.parsing import classify_document
from resume_analyzer.models.models import (
    AIAssessment,
    AnalysisResult,
    DocumentKind,
    FitAssessment,
    SkillMatch,
    Strategy,
    Transcript,
    UploadedDocument,
)
from resume_analyzer.models.settings import get_settings
from resume_analyzer.services.extraction import extract_text
from resume_analyzer.services.matching import match_skills, score_fit
from resume_analyzer.services.reasoning import ReasoningAdapter
from resume_analyzer.utils.exceptions import (
    MalformedUpstreamResponse,
    UnsupportedFormat,
    UpstreamServiceFailure,
)
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

TASK_SCORE = "score"
TASK_ASSESS = "assess"
TASK_INTERVIEW = "interview"


# LangGraph state and nodes
class PipelineState(TypedDict, total=False):
    document: UploadedDocument
    job_description: str
    task: str
    fallback: bool
    kind: DocumentKind
    transcript: Transcript
    skill_match: SkillMatch
    fit: FitAssessment
    ai: AIAssessment
    ai_error: str
    interview_prep: str


def get_reasoning_adapter() -> ReasoningAdapter:
    return ReasoningAdapter()


def deterministic_scores(transcript: Transcript, job_description: str) -> dict:
    skill_match = match_skills(transcript.text)
    fit = score_fit(
        skill_match.found_skills,
        job_description,
        whole_word=get_settings().processing.jd_whole_word_matching,
    )
    return {"skill_match": skill_match, "fit": fit}


async def node_classify(state: PipelineState):
    document = state["document"]
    kind = classify_document(document.filename, document.content_type)
    logger.debug(f"Classified '{document.filename}' ({document.content_type}) as {kind.value}")
    if kind == DocumentKind.UNSUPPORTED:
        raise UnsupportedFormat(filename=document.filename, content_type=document.content_type)
    return {"kind": kind}


async def node_extract(state: PipelineState):
    transcript = await extract_text(state["document"], state["kind"])
    return {"transcript": transcript}


async def node_score(state: PipelineState):
    return deterministic_scores(state["transcript"], state.get("job_description", ""))


async def node_assess(state: PipelineState):
    try:
        ai = await get_reasoning_adapter().assess(state["transcript"], state.get("job_description", ""))
    except (UpstreamServiceFailure, MalformedUpstreamResponse) as e:
        if not state.get("fallback"):
            raise
        logger.warning(
            f"AI assessment failed ({e.error_code}: {e.message}); falling back to deterministic scoring",
            extra={"error_code": e.error_code, "details": e.details},
        )
        # ai_error is returned to the client as fallbackReason
        return {
            **deterministic_scores(state["transcript"], state.get("job_description", "")),
            "ai_error": e.public_message or e.error_code,
        }
    return {"ai": ai}


async def node_interview(state: PipelineState):
    text = await get_reasoning_adapter().interview_prep(state["transcript"], state.get("job_description", ""))
    return {"interview_prep": text}


def route_task(state: PipelineState) -> str:
    return state["task"]


def build_graph():
    g = StateGraph(PipelineState)
    g.add_node("classify", node_classify)
    g.add_node("extract", node_extract)
    g.add_node(TASK_SCORE, node_score)
    g.add_node(TASK_ASSESS, node_assess)
    g.add_node(TASK_INTERVIEW, node_interview)
    g.set_entry_point("classify")
    g.add_edge("classify", "extract")
    g.add_conditional_edges(
        "extract",
        route_task,
        {TASK_SCORE: TASK_SCORE, TASK_ASSESS: TASK_ASSESS, TASK_INTERVIEW: TASK_INTERVIEW},
    )
    g.add_edge(TASK_SCORE, END)
    g.add_edge(TASK_ASSESS, END)
    g.add_edge(TASK_INTERVIEW, END)
    return g.compile()


_graph = None


def get_graph():
    global _graph
    if _graph is None:
        _graph = build_graph()
    return _graph


async def run_analysis(
    document: UploadedDocument,
    job_description: str = "",
    strategy: Strategy = Strategy.DETERMINISTIC,
    fallback: bool = False,
) -> AnalysisResult:
    task = TASK_ASSESS if strategy == Strategy.AI else TASK_SCORE
    state = await get_graph().ainvoke({
        "document": document,
        "job_description": job_description or "",
        "task": task,
        "fallback": fallback,
    })
    return AnalysisResult(
        strategy=strategy,
        source_kind=state["kind"],
        skill_match=state.get("skill_match"),
        fit=state.get("fit"),
        ai=state.get("ai"),
        ai_error=state.get("ai_error"),
    )


async def run_interview_prep(document: UploadedDocument, job_description: str = "") -> str:
    state = await get_graph().ainvoke({
        "document": document,
        "job_description": job_description or "",
        "task": TASK_INTERVIEW,
        "fallback": False,
    })
    return state["interview_prep"]
