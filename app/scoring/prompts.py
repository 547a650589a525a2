from __future__ import annotations

from app.scoring.models import JobRequirements, ParsedProfile

EXTRACTOR_SYSTEM_PROMPT = """
You are a comprehensive resume and job description parser.
Extract ALL skills (technical AND soft) and detailed experience information.
Return strict JSON only:
{
  "resume_summary": "2-3 sentence professional summary from the resume",
  "resume_skills": ["every technical and soft skill found anywhere in the resume"],
  "resume_experience": "experience overview: recent roles, achievements, project types and environments, years and domains",
  "job_required_skills": ["..."],
  "job_preferred_skills": ["..."],
  "job_keywords": ["..."],
  "experience_level": "experience requirement (years/level) from the job description"
}
Rules for resume_skills:
- Scan ALL sections, not only a "Skills" heading: Technical Skills, Soft Skills, Core Competencies,
  Strengths, Summary, Experience bullets and Projects.
- Include technical skills (languages, tools, technologies, standards such as ICAO, CAP168, EASA),
  soft skills (communication, leadership, teamwork, problem solving, time management) and professional
  skills (project management, client relationship management, business development).
- "Excellent Communication Skills" -> "Communication Skills".
- "Planning and Organizational Skills" -> "Planning" and "Organizational Skills".
Rules for resume_experience:
- Mention specialised experience that matches the job (e.g. live airfield projects, site supervision).
Keep lists deduplicated. No markdown.
""".strip()

FIRST_PASS_SYSTEM_PROMPT = """
You are a fast, accurate resume scorer. Compare the parsed resume against the job requirements.
Scoring criteria:
- Skills Match (50%): technical and soft skills alignment
- Experience (40%): relevant experience and achievements
- Keywords (10%): ATS optimization
Scores anywhere from 0 to 100 are expected; be realistic.
Return strict JSON only:
{
  "match_score": 0-100,
  "matched_skills": ["skills found in both the resume and the job requirements"],
  "missing_skills": ["required/preferred skills NOT found in the resume"],
  "recommendations": ["3 specific improvements"],
  "alternative_positions": ["2 job titles, only if match_score < 40"]
}
Rules:
- If a missing skill is a phrase (e.g. "Knowledge of ICAO, CAP168 and EASA design standards"), include it
  only if at least one of its components is truly missing from the resume.
- Never report as missing a skill that is already present in the resume, even if phrased differently.
- Never put the same skill in both matched_skills and missing_skills.
""".strip()

OPTIMIZED_SYSTEM_PROMPT = """
You are validating a resume that was already optimized for this job. It should score 90-100 with minimal
missing skills. Be thorough in finding skills before marking anything as missing.
Validation criteria (stricter):
- Skills Match (50%): all required and preferred skills should be present
- Experience (30%): skills demonstrated in accomplishments
- Education (10%): requirements met
- Keywords (10%): ATS optimized
Return strict JSON only:
{
  "match_score": 90-100,
  "matched_skills": ["all skills found in the resume, technical AND soft"],
  "missing_skills": ["genuinely missing skills, 0-2 expected"],
  "recommendations": ["max 2 minor improvements"],
  "optimization_validation": {
    "achieved_zero_missing": true,
    "meets_target_score": true,
    "skills_demonstrated": 0
  }
}
Rules:
- If a missing skill is a phrase (e.g. "Knowledge of ICAO, CAP168 and EASA design standards"), include it
  only if at least one of its components is truly missing from the resume.
- Never report as missing a skill that is already present in the resume, even if phrased differently.
- Never put the same skill in both matched_skills and missing_skills.
""".strip()


def build_extractor_user_prompt(resume_text: str, job_text: str) -> str:
    return f"RESUME TEXT:\n{resume_text}\n\nJOB DESCRIPTION:\n{job_text}"


def build_evaluator_user_prompt(profile: ParsedProfile, requirements: JobRequirements) -> str:
    return (
        "RESUME:\n"
        f"Summary: {profile.summary}\n"
        f"Skills: {', '.join(profile.skills)}\n"
        f"Experience: {profile.experience_summary}\n\n"
        "JOB REQUIREMENTS:\n"
        f"Required Skills: {', '.join(requirements.required_skills)}\n"
        f"Preferred Skills: {', '.join(requirements.preferred_skills)}\n"
        f"Keywords: {', '.join(requirements.keywords)}\n"
        f"Experience Level: {requirements.experience_level}"
    )
