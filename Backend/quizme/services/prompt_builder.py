from langchain_core.prompts import PromptTemplate

from quizme.schemas import Difficulty, PromptPayload

SYSTEM_PROMPT = (
    "You are an expert educator who creates engaging and accurate quizzes based on "
    "study materials. Always respond with valid JSON format."
)

DIFFICULTY_INSTRUCTIONS = {
    Difficulty.EASY: "Create simple, straightforward questions that test basic understanding and recall of key facts.",
    Difficulty.MEDIUM: "Create moderate difficulty questions that require some analysis and understanding of concepts.",
    Difficulty.HARD: "Create challenging questions that require critical thinking, analysis, and deep understanding of the material.",
}

QUIZ_TEMPLATE = """
Based on the following study material, create a {difficulty} difficulty quiz with exactly {number} multiple-choice questions.

Study Material:
\"\"\"
{text}
\"\"\"

Requirements:
- {instruction}
- Each question should have exactly 4 options (A, B, C, D)
- Only one option should be correct
- Questions should be diverse and cover different parts of the material
- Avoid questions that are too obvious or too obscure
- Make sure all questions are answerable based on the provided material

Return the response in this exact JSON format:
{{
  "title": "Quiz from Study Material",
  "difficulty": "{difficulty}",
  "totalQuestions": {number},
  "questions": [
    {{
      "id": 1,
      "question": "Your question here?",
      "options": {{
        "A": "First option",
        "B": "Second option",
        "C": "Third option",
        "D": "Fourth option"
      }},
      "correctAnswer": "A",
      "explanation": "Brief explanation of why this is correct"
    }}
  ]
}}

Make sure to return valid JSON only, no additional text or markdown formatting."""

quiz_prompt = PromptTemplate(
    input_variables=["text", "difficulty", "number", "instruction"],
    template=QUIZ_TEMPLATE,
)

def build_prompt(
    document_text: str,
    difficulty: Difficulty,
    question_count: int,
    max_chars: int = 8000,
    max_tokens: int = 3000,
    temperature: float = 0.7,
) -> PromptPayload:
    """Build the completion payload for one quiz.

    Only the first ``max_chars`` characters of the document are embedded.
    """
    difficulty = Difficulty(difficulty)
    prompt = quiz_prompt.format(
        text=document_text[:max_chars],
        difficulty=difficulty.value,
        number=question_count,
        instruction=DIFFICULTY_INSTRUCTIONS[difficulty],
    )
    return PromptPayload(
        system=SYSTEM_PROMPT,
        prompt=prompt,
        max_tokens=max_tokens,
        temperature=temperature,
    )
