"""
Prompt sent to the extraction service.
"""

EXTRACTION_PROMPT = """Analyze this job rejection feedback and extract structured information.

Respond with ONLY a single JSON object. Do not add any explanation, and do not wrap it in code fences.

The JSON object must have exactly these fields:
{{
  "company": "company name, or \\"Unknown\\" if not mentioned",
  "role": "job title, or \\"Unknown\\" if not mentioned",
  "stage": "one of: resume_screen, phone, technical, behavioral, final",
  "explicitReason": "the main reason given for the rejection, in a few words",
  "implicitSignals": ["signals that are implied but not stated directly"],
  "severity": "one of: low, medium, high"
}}

Rejection feedback:
{feedback}"""


def build_extraction_prompt(feedback: str) -> str:
    """Embed the literal feedback text in the extraction instructions."""
    return EXTRACTION_PROMPT.format(feedback=feedback)
