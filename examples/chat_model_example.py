"""
Example script: use a langchain chat model for extraction and start
remediation on the top skill gap.

Required environment variables in .env:
- ANTHROPIC_API_KEY: API key used by langchain-anthropic
"""
import asyncio
from langchain_anthropic import ChatAnthropic
from rejectwise.interfaces.interface import RejectWise
from rejectwise.utils.config import Config

async def main():
    config = Config()
    llm = ChatAnthropic(model=config.get("model"), max_tokens=config.get_int("max_tokens"))
    app = RejectWise.from_config(config, llm=llm)

    await app.submit_feedback(
        "We went with another candidate who had more production experience with Kubernetes."
    )
    if app.error:
        print(f"✗ {app.error}")
        return

    gaps = sorted(app.profile.skill_gaps, key=lambda gap: gap.evidence_count, reverse=True)
    if gaps:
        profile = app.start_remediation(gaps[0].area)
        for track in profile.improvement_tracking:
            print(f"Working on {track.gap} since {track.start_date:%Y-%m-%d} ({track.status.value})")

if __name__ == "__main__":
    asyncio.run(main())
