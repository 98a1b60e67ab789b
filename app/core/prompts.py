PORTRAIT_PROMPT = (
    "Make a realistic, high-quality portrait of the same person, "
    "showing a successful, confident professional look. "
    "Clean studio lighting, natural skin texture, "
    "well-groomed appearance. "
    "Preserve identity. No cartoon or stylization."
)

PROCESSING_TEXT = "Processing your successful version ⏳"
FOLLOW_UP_TEXT = "Would you post this as a profile photo or story?"
INSTRUCTION_TEXT = "Send a photo and I’ll show how you’d look if you were successful ✨"
FAILURE_TEXT = "Sorry, I couldn't create your image right now. Please try again with another photo."
