from datetime import datetime, timezone
from typing import Any, Dict, List

from app.schemas.quiz import MAX_SCORE, ResultView


def generate_quiz_report(view: ResultView, title: str = "Political Alignment Quiz") -> Dict[str, Any]:

    similarity = view.similarity
    max_similarity = view.max_similarity
    percentage = round((similarity / max_similarity) * 100, 2) if max_similarity else 0.0

    # -------------------------
    # PER-CATEGORY COMPARISON
    # -------------------------
    comparison: List[Dict[str, Any]] = []
    for point in view.chart_data:
        gap = abs(point.user - point.delegate)
        comparison.append({
            "category": point.subject,
            "user": point.user,
            "delegate": point.delegate,
            "gap": gap,
            "agreement": MAX_SCORE - gap,
        })

    # first-listed category wins ties in both directions
    closest = min(comparison, key=lambda row: row["gap"])["category"] if comparison else None
    furthest = max(comparison, key=lambda row: row["gap"])["category"] if comparison else None

    # -------------------------
    # SUMMARY
    # -------------------------
    summary = [
        f"Your best match is {view.match_name}.",
        f"Similarity score: {similarity} out of {max_similarity} ({percentage}%).",
    ]
    if closest is not None:
        summary.append(f"You are most closely aligned on {closest}.")
    if furthest is not None and furthest != closest:
        summary.append(f"You differ most on {furthest}.")
    summary.append(f"Quizzes completed so far: {len(view.history)}.")

    # -------------------------
    # FINAL REPORT OBJECT
    # -------------------------
    return {
        "title": title,
        "match_name": view.match_name,
        "summary": summary,
        "scores": {
            "similarity": similarity,
            "max_similarity": max_similarity,
            "percentage": percentage,
        },
        "comparison": comparison,
        "closest_category": closest,
        "furthest_category": furthest,
        "history": [
            {"date": entry.date.isoformat(), "match_name": entry.match_name}
            for entry in view.history
        ],
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }
