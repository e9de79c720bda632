import logging

from superfocus.core.generation import build_user_message, generate_structured
from superfocus.models.tutor import JokeRequest, JokeResponse, TutorRequest, TutorResponse
from .prompts import JOKE_TELLER_SYSTEM_PROMPT, TUTOR_SYSTEM_PROMPT

logger = logging.getLogger("superfocus.agents.tutor")


async def connect_with_tutor(request: TutorRequest) -> TutorResponse:
    """
    Answer a student's question with the subject-specialised tutor persona.
    Earlier turns of the conversation are replayed so follow-ups keep their context.
    """
    logger.info(f"[TutorAgent] 🎓 {request.subject} question ({len(request.student_question)} chars)")

    system_prompt = f"{TUTOR_SYSTEM_PROMPT}\n\nYou are specializing in {request.subject}."
    messages = [{"role": "system", "content": system_prompt}]
    for turn in request.conversation_history or []:
        messages.append({"role": turn.role, "content": turn.content})

    question = f'A student has a question: "{request.student_question}"'
    if request.homework_image:
        question += "\n\nThe student has also provided an image of their handwritten work."
    messages.append(build_user_message(question, request.homework_image))

    return await generate_structured(messages=messages, schema=TutorResponse)


async def tell_joke(request: JokeRequest) -> JokeResponse:
    return await generate_structured(
        messages=[
            {"role": "system", "content": JOKE_TELLER_SYSTEM_PROMPT},
            {"role": "user", "content": f"Tell me a kid-friendly joke about {request.subject}."},
        ],
        schema=JokeResponse,
        temperature=0.9,
    )
