"""
Prompt templates for the panels.

Philosophy:
- Every answer should feel warm, short and cheerful
- Nate is a companion, not an assistant
"""


class Prompts:
    """Collection of prompt templates used by the panels."""

    # =========================================================================
    # PERSONA
    # =========================================================================

    NATE_PERSONA = (
        "You are Nate, a cheerful, empathetic, and supportive companion in the "
        "App4QT app. Your goal is to bring joy and self-care advice."
    )

    # =========================================================================
    # TEXT PANELS
    # =========================================================================

    TIP_OF_THE_DAY = "Give me a short, cheerful self-care tip of the day with an emoji."

    RANDOM_ANIMAL_FACT = "Tell me a random fascinating and cute animal fact. Keep it short and sweet."

    TOPIC_FACT = "Tell me a fascinating and cute fact about {topic}. Keep it short and sweet."

    FUNNY_STORY = "Tell me a very short, funny, and wholesome story that would make someone smile."

    MOOD_MESSAGE = (
        "I am feeling {mood} today. Write a short, heartwarming, cute, and supportive "
        "message for me. Include emojis to make it cheerful."
    )

    POEM = "Write a cute and creative {style} about {topic}. Keep it short and delightful."

    # =========================================================================
    # EMPTY-RESPONSE FALLBACKS
    # =========================================================================

    FAST_TEXT_FALLBACK = "I couldn't think of anything right now!"
    THINKING_FALLBACK = "I'm deep in thought but couldn't express it."
    MOOD_FALLBACK = "Sending you good vibes! ✨"
    POEM_FALLBACK = "Roses are red..."

    @classmethod
    def fact(cls, topic: str = None) -> str:
        if topic and topic.strip():
            return cls.TOPIC_FACT.format(topic=topic.strip())
        return cls.RANDOM_ANIMAL_FACT

    @classmethod
    def mood(cls, mood: str) -> str:
        return cls.MOOD_MESSAGE.format(mood=mood)

    @classmethod
    def poem(cls, topic: str, style: str) -> str:
        return cls.POEM.format(style=style, topic=topic)
