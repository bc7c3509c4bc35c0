from __future__ import annotations

# Monthly climate report copy

REPORT_NO_DATA_SUMMARY = "No self-assessments were recorded for this period."

REPORT_NO_DATA_FINDINGS = [
    "There is not enough data to describe the team's emotional climate this month.",
    "Encourage collaborators to log their mood, stress and workload regularly.",
]

REPORT_SUMMARY_TEMPLATE = (
    "Emotional climate report for {month:02d}/{year} based on {count} self-assessment(s)."
)

REPORT_FINDING_TEMPLATES = {
    "mood": "Average mood was {value:.2f} on a scale of 1 (very bad) to 5 (very good).",
    "stress": "Average stress was {value:.2f} on a scale of 1 (very low) to 5 (very high).",
    "workload": "Average workload was {value:.2f} on a scale of 1 (very low) to 5 (overloaded).",
}

REPORT_ACTIONS: dict[str, list[str]] = {
    "high_stress": [
        "Run stress-management sessions such as guided breathing or mindfulness workshops.",
        "Review deadlines and meeting load with team leads to reduce pressure peaks.",
    ],
    "high_workload": [
        "Rebalance task distribution across the team and revisit sprint scope.",
        "Agree on protected focus time and discourage after-hours work.",
    ],
    "low_mood": [
        "Schedule one-on-one check-ins between managers and collaborators.",
        "Promote the available psychological support and employee assistance channels.",
    ],
    "maintenance": [
        "Keep the current wellbeing practices and recognise what is working well.",
        "Continue collecting monthly self-assessments to spot changes early.",
    ],
}

# Personal recommendation copy

ONBOARDING_RECOMMENDATION = {
    "title": "No data yet",
    "description": "Log your first self-assessment so we can personalise your recommendations.",
    "category": "onboarding",
}

RULE_RECOMMENDATIONS: dict[str, dict[str, str]] = {
    "high_stress": {
        "title": "Take short recovery breaks",
        "description": (
            "Your recent stress levels are high. Try a five-minute breathing exercise "
            "between tasks and block time for a real lunch break."
        ),
        "category": "stress_management",
    },
    "high_workload": {
        "title": "Talk about your workload",
        "description": (
            "Your workload has been heavy lately. List your priorities and discuss "
            "with your manager what can be postponed or delegated."
        ),
        "category": "workload",
    },
    "low_mood": {
        "title": "Look after your emotional health",
        "description": (
            "Your mood has been low. Reach out to someone you trust and consider the "
            "psychological support channels offered by the company."
        ),
        "category": "emotional_health",
    },
    "maintenance": {
        "title": "Keep up your healthy routine",
        "description": (
            "Your recent check-ins look balanced. Keep the habits that are working "
            "and keep logging how you feel."
        ),
        "category": "maintenance",
    },
}

RECOMMENDATION_PROMPT_HEADER = [
    "Act as a corporate wellbeing psychologist.",
    "Analyse these self-assessments (scales from 1 to 5):",
]

RECOMMENDATION_PROMPT_FOOTER = [
    "",
    "Write 3 short, practical recommendations for this person.",
    (
        'Answer ONLY with a JSON array: '
        '[{"title": "...", "description": "...", "category": "..."}]'
    ),
]

# Diagnostic recommendations returned when the provider cannot be used
PROVIDER_DIAGNOSTICS: dict[str, tuple[str, str]] = {
    "config_missing": ("Configuration error", "The text-generation API key is not configured."),
    "transport": ("Connection error", "Could not reach the text-generation provider."),
    "status": ("Provider error", "The text-generation provider answered with status {status}."),
    "empty": ("Empty answer", "The text-generation provider returned no text."),
}

DIAGNOSTIC_CATEGORY = "debug_error"
RAW_TEXT_TITLE = "Recommendation"
RAW_TEXT_CATEGORY = "general_advice"
