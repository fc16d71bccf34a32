"""
Contenido fijo que sustituye a las llamadas externas que fallan.
Todas las rutas de degradación del orquestador usan estas constantes.
"""

PLACEHOLDER_TRANSCRIPT = (
    "This is a simulated transcript. The video explores the depths of consciousness "
    "and the interconnectedness of all things. It speaks to the journey of the soul "
    "through time and space, seeking the ultimate truth of existence."
)

MOCK_STRUCTURED = (
    "AI Generation Failed (Check Server Logs). Mock: The video covers three main points: "
    "1. The importance of mindfulness. 2. How to practice daily gratitude. "
    "3. The connection between inner peace and outer reality."
)
MOCK_SPIRITUAL = (
    "AI Generation Failed. Mock: At its core, this message invites you to return "
    "to the sanctuary of your own heart."
)
MOCK_QUOTE = "The universe is not outside of you."
MOCK_IMAGE_PROMPT = "A mock spiritual background."

FALLBACK_IMAGE_URL = (
    "https://images.unsplash.com/photo-1518531933037-91b2f5f229cc"
    "?q=80&w=1000&auto=format&fit=crop"
)

MOCK_SUMMARIES = {
    "structured": MOCK_STRUCTURED,
    "spiritual": MOCK_SPIRITUAL,
    "quote": MOCK_QUOTE,
    "image_prompt": MOCK_IMAGE_PROMPT,
}
