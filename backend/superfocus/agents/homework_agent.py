import logging
from typing import List

from superfocus.core.errors import StructuredOutputError
from superfocus.core.generation import build_user_message, generate_structured
from superfocus.models.homework import (
    HomeworkFeedbackRequest,
    HomeworkFeedbackResponse,
    HomeworkPlanDraft,
    HomeworkPlanEntry,
    HomeworkPlanRequest,
    HomeworkPlanResponse,
    HomeworkTask,
)
from .prompts import HOMEWORK_FEEDBACK_SYSTEM_PROMPT, HOMEWORK_PLANNER_SYSTEM_PROMPT

logger = logging.getLogger("superfocus.agents.homework")


async def get_homework_feedback(request: HomeworkFeedbackRequest) -> HomeworkFeedbackResponse:
    """
    Review a photo of the student's homework and coach them without giving the answers away.
    """
    logger.info(f"[HomeworkAgent] 🔍 Reviewing {request.subject} homework image")

    system_prompt = f"{HOMEWORK_FEEDBACK_SYSTEM_PROMPT}\n\nSubject: {request.subject}"
    user_message = build_user_message(
        "Please analyze this homework and provide feedback.",
        request.homework_image,
    )
    return await generate_structured(
        messages=[{"role": "system", "content": system_prompt}, user_message],
        schema=HomeworkFeedbackResponse,
    )


def format_task_list(tasks: List[HomeworkTask]) -> str:
    return "\n".join(
        f"{index}. Subject: {task.subject}, Topic: {task.topic}, Estimated Time: {task.estimated_time} minutes"
        for index, task in enumerate(tasks, 1)
    )


async def create_homework_plan(request: HomeworkPlanRequest) -> HomeworkPlanResponse:
    """
    Turn the student's task list into a step-by-step plan, one entry per task in input order.
    """
    task_count = len(request.tasks)
    logger.info(f"[HomeworkAgent] 🗂️ Planning {task_count} task(s) for {request.student_name}")

    user_prompt = f"""Help {request.student_name} create a homework plan for the day.

The student has provided the following tasks, in the order they want to work on them:
{format_task_list(request.tasks)}

Return exactly {task_count} plan entries, one per task, in the same order."""

    draft = await generate_structured(
        messages=[
            {"role": "system", "content": HOMEWORK_PLANNER_SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ],
        schema=HomeworkPlanDraft,
    )

    if len(draft.plan) != task_count:
        logger.warning(f"[HomeworkAgent] ⚠️ Plan has {len(draft.plan)} entries for {task_count} tasks")
        raise StructuredOutputError(details=[{
            "type": "plan_length",
            "msg": f"expected {task_count} plan entries, got {len(draft.plan)}",
        }])

    # Subject, topic and time are the student's own; the model only adds coaching
    plan = [
        HomeworkPlanEntry(
            subject=task.subject,
            topic=task.topic,
            estimated_time=task.estimated_time,
            steps=entry.steps,
            encouragement=entry.encouragement,
        )
        for task, entry in zip(request.tasks, draft.plan)
    ]
    return HomeworkPlanResponse(
        plan=plan,
        summary=draft.summary,
        follow_up_question=draft.follow_up_question,
    )
