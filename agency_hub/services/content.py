"""AI content generation — marketing copy, images, video placeholder."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gpt-4o"
IMAGE_MODEL = "dall-e-3"
VIDEO_MODEL = "sora"

VIDEO_PLACEHOLDER = "Sora video generation is coming soon. Please check back later for this feature."


def generation_type(model: str | None) -> str:
    """Stored generation type for a requested model."""
    if model == IMAGE_MODEL:
        return "image"
    if model == VIDEO_MODEL:
        return "video"
    return "text"


def writer_prompt(content_type: str | None, tone: str | None) -> str:
    if content_type and tone:
        return (
            f"You are a professional {content_type.replace('_', ' ')} writer. "
            f"Write in a {tone} tone. Create high-quality content that is engaging and well-structured."
        )
    return "You are a professional content writer. Create high-quality, engaging content."


def generate_content(client, prompt: str, content_type: str | None = None,
                     tone: str | None = None, model: str | None = None) -> str:
    """Generate content for ``prompt`` with the requested model.

    Returns an image URL for dall-e-3, a placeholder for sora, and the
    completion text otherwise. OpenAI errors propagate.
    """
    if model == VIDEO_MODEL:
        return VIDEO_PLACEHOLDER

    if client is None:
        raise RuntimeError("OPENAI_API_KEY not set — cannot generate content")

    if model == IMAGE_MODEL:
        response = client.images.generate(
            model=IMAGE_MODEL,
            prompt=prompt,
            n=1,
            size="1024x1024",
            quality="standard",
        )
        data = response.data or []
        return (data[0].url or "") if data else ""

    text_model = model or DEFAULT_TEXT_MODEL
    response = client.chat.completions.create(
        model=text_model,
        messages=[
            {"role": "system", "content": writer_prompt(content_type, tone)},
            {"role": "user", "content": prompt},
        ],
        max_tokens=2000,
        temperature=0.7,
    )
    content = response.choices[0].message.content or ""
    logger.info("Generated %d chars of %s content with %s", len(content),
                content_type or "general", text_model)
    return content
