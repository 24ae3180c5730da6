"""Score Booster - guarantees a visible score improvement for the tailored document.

Target = min(100, max(score_before + min_improvement, score_floor)). Up to
three passes run while the tailored document is below target:

1. Inject missing required/preferred skills into the core skill group
2. Weave the top missing keywords into the summary
3. Append one skill-referencing bullet to the most recent role

Each pass is followed by reconcile + re-score; a pass that lowers the score
is reverted. If the floor is still unmet, an emergency pass adds every
remaining missing term to an "Additional Skills" group. Never raises: a
residual gap is reported through ``BoostResult.shortfall``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from resumemate.config import BoosterConfig
from resumemate.models.document import SkillGroup, TailoredDocument
from resumemate.models.profile import CandidateProfile, TargetProfile
from resumemate.models.scoring import ScoreBreakdown
from resumemate.pipeline.consistency import document_text, reconcile
from resumemate.pipeline.rules import ADDITIONAL_SKILLS_GROUP, CORE_SKILL_GROUP
from resumemate.pipeline.scorer import score_candidate, score_document, skill_labels_for
from resumemate.utils.text_match import same_term, term_present

logger = logging.getLogger(__name__)

SKILL_BULLET_TEMPLATE = "Applied {skill} to deliver results aligned with project goals and team standards."


@dataclass
class BoostResult:
    document: TailoredDocument
    score_before: ScoreBreakdown
    score_after: ScoreBreakdown
    target_score: int
    boosted: bool = False
    actions: list[str] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        """Points still missing to reach the target; 0 when met."""
        return max(0, self.target_score - self.score_after.score)


def boost(
    document: TailoredDocument,
    candidate: CandidateProfile,
    target: TargetProfile,
    config: BoosterConfig | None = None,
) -> BoostResult:
    config = config or BoosterConfig()
    score_before = score_candidate(candidate, target)
    target_score = min(100, max(score_before.score + config.min_improvement, config.score_floor))

    current = document.model_copy(deep=True)
    score_after = score_document(current, target)
    actions: list[str] = []
    boosted = False

    passes = (_inject_skills, _weave_summary, _add_skill_bullet)
    for boost_pass in passes[: config.max_passes]:
        if score_after.score >= target_score:
            break
        boosted = True
        candidate_doc, action = boost_pass(current, target, config)
        if action is None:
            continue
        candidate_doc = reconcile(candidate_doc)
        rescored = score_document(candidate_doc, target)
        if rescored.score < score_after.score:
            logger.debug("Boost pass %s lowered score %d -> %d; reverted", boost_pass.__name__, score_after.score, rescored.score)
            continue
        current, score_after = candidate_doc, rescored
        actions.append(action)

    if score_after.score < config.score_floor:
        candidate_doc, action = _emergency_inject(current, target)
        if action is not None:
            current = reconcile(candidate_doc)
            score_after = score_document(current, target)
            actions.append(action)
            boosted = True

    result = BoostResult(
        document=current,
        score_before=score_before,
        score_after=score_after,
        target_score=target_score,
        boosted=boosted,
        actions=actions,
    )
    if result.shortfall:
        logger.info(
            "Score target %d not reached (before %d, after %d)",
            target_score, score_before.score, score_after.score,
        )
    return result


# ── Passes ──


def missing_labels(document: TailoredDocument, requirements: list[str]) -> list[str]:
    """Skill labels from ``requirements`` that the document does not mention yet."""
    text = document_text(document)
    skills = document.skill_items()
    return [
        label
        for label in skill_labels_for(requirements)
        if not any(same_term(s, label) for s in skills) and not term_present(text, label)
    ]


def _inject_skills(document, target, config):
    missing = missing_labels(document, [*target.required_skills, *target.preferred_skills])
    to_add = missing[: config.max_injected_skills]
    if not to_add:
        return document, None

    updated = document.model_copy(deep=True)
    if not updated.skills:
        updated.skills = [SkillGroup(category="Core Skills", items=[])]
    index = next((i for i, g in enumerate(updated.skills) if CORE_SKILL_GROUP.search(g.category)), 0)
    updated.skills[index].items.extend(to_add)
    return updated, f"Injected {len(to_add)} missing skill(s): {', '.join(to_add)}"


def _weave_summary(document, target, config):
    missing = missing_labels(document, [*target.required_skills, *target.preferred_skills, *target.keywords])
    to_weave = missing[: config.max_summary_terms]
    if not to_weave:
        return document, None

    phrase = ", ".join(to_weave)
    summary = document.summary.strip()
    if summary.endswith("."):
        summary = f"{summary[:-1]}, with expertise in {phrase}."
    elif summary:
        summary = f"{summary}. Experienced with {phrase}."
    else:
        summary = f"Experienced with {phrase}."
    updated = document.model_copy(update={"summary": summary}, deep=True)
    return updated, f"Wove {len(to_weave)} keyword(s) into summary"


def _add_skill_bullet(document, target, config):
    if not document.experience or len(document.experience[0].bullets) >= config.max_bullets_per_role:
        return document, None
    missing = missing_labels(document, list(target.required_skills))
    if not missing:
        return document, None

    bullet = SKILL_BULLET_TEMPLATE.format(skill=missing[0])
    updated = document.model_copy(deep=True)
    updated.experience[0].bullets.append(bullet)
    return updated, f'Added skill-aligned bullet: "{bullet}"'


def _emergency_inject(document, target):
    missing = missing_labels(document, [*target.required_skills, *target.preferred_skills, *target.keywords])
    if not missing:
        return document, None

    updated = document.model_copy(deep=True)
    existing = next((g for g in updated.skills if g.category == ADDITIONAL_SKILLS_GROUP), None)
    if existing is None:
        updated.skills.append(SkillGroup(category=ADDITIONAL_SKILLS_GROUP, items=missing))
    else:
        existing.items.extend(missing)
    return updated, f"Emergency keyword injection: {len(missing)} term(s)"
