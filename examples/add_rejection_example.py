"""
Example script: add a rejection and print the resulting insights.

Required environment variables in .env:
- ANTHROPIC_API_KEY: API key for the extraction service
Optional:
- REJECTWISE_MODEL: Model identifier
- REJECTWISE_STORAGE_DIR: Where session data is stored
- REJECTWISE_LOG_FILE: Also write logs to this file
"""
import asyncio
import sys
from rejectwise.interfaces.interface import RejectWise
from rejectwise.utils.config import Config
from rejectwise.utils.logger import setup_logger

FEEDBACK = """Thank you for interviewing with us for the Backend Engineer role.
The team enjoyed meeting you, but felt your system design answers did not
go deep enough into scaling and data consistency for this level."""

async def main():
    config = Config()
    setup_logger("rejectwise", log_file=config.get("log_file"))

    app = RejectWise.from_config(config)

    text = sys.argv[1] if len(sys.argv) > 1 else FEEDBACK
    record = await app.submit_feedback(text)
    if record is None:
        print(f"✗ {app.error}")
        return

    print(f"✓ Added rejection from {record.company} ({record.stage.value}, {record.emotional_context.value})")

    insights = app.insights
    print(f"\nTotal rejections: {insights.total_rejections}")
    print(f"Stage breakdown: {insights.stage_breakdown}")
    if insights.improvement_rate is not None:
        print(f"Improvement rate: {insights.improvement_rate:+.1f} pts")

    print("\nPatterns:")
    for pattern in insights.patterns:
        print(f"  [{pattern.severity.value}] {pattern.message}")

    print("\nAction plan:")
    for item in insights.next_actions:
        print(f"  [{item.priority.value}] {item.action} ({item.timeframe})")

    print("\nSkill gaps:")
    for gap in app.profile.skill_gaps:
        print(f"  {gap.area}: {gap.evidence_count}x, {gap.priority.value}, {gap.remediation_status.value}")

if __name__ == "__main__":
    asyncio.run(main())
