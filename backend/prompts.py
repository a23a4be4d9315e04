# prompts.py
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from analysis import AnalysisRequest

# Static part of the prompt. Kept out of the f-string below because the
# example JSON is full of braces.
OUTPUT_INSTRUCTIONS = """
Your response MUST be a single JSON object. This JSON object MUST have exactly two top-level keys:
1. `extracted_fields`: A JSON object containing all clearly identifiable parsed resume data. Include the following sub-fields. If a field is not found or is ambiguous, set its value to `null` for single values or an empty array `[]` for lists.
   - `name` (string, full name of the candidate)
   - `email` (string)
   - `phone` (string)
   - `linkedin` (string, full URL if present)
   - `skills` (array of strings, technical and soft skills; focus on industry-relevant keywords)
   - `work_experience` (array of objects, each with `company`, `role`, `dates` (e.g. "Jan 2020 - Present") and `description` (concise summary of responsibilities and quantifiable achievements))
   - `education` (array of objects, each with `degree`, `institution` and `dates` (e.g. "2018-2022"))
   - `summary_or_objective` (string, the candidate's summary or career objective if present)
   - `certifications` (array of strings, formal certifications or licenses)
   - `projects` (array of objects, each with `name` and `description` covering impact and technologies used)
   - `languages` (array of strings, natural languages and proficiency if specified)

2. `questionnaire_prompt`: A detailed, multi-paragraph string with constructive, personalized feedback and an actionable questionnaire that helps the user improve the resume for the target role and company. It should:
   - Start with a positive observation about the resume's strengths relevant to the target role.
   - Identify 1-3 specific areas for improvement (missing quantified achievements, missing role keywords, unclear progression, formatting) with actionable advice for each.
   - Give tailoring advice for the target company when one is given, otherwise general best practices for that kind of company.
   - End with a numbered questionnaire of 3-5 questions that prompt the user to reflect on their experience and articulate it better.
   - Use markdown bullet points (`*`) and blank lines (`\\n\\n`) between paragraphs so it renders well.

Example of the desired JSON structure (adhere strictly to it):
```json
{
    "extracted_fields": {
        "name": "Alex Johnson",
        "email": "alex.j@example.com",
        "phone": "+1 (555) 123-4567",
        "linkedin": "https://www.linkedin.com/in/alexjohnson",
        "skills": ["Python", "Machine Learning", "SQL", "Communication"],
        "work_experience": [
            {"company": "Data Insights Corp", "role": "Data Scientist", "dates": "Jan 2022 - Present", "description": "Built churn models (15% reduction); automated pipelines saving 10 hours/week."}
        ],
        "education": [
            {"degree": "M.Sc. Data Science", "institution": "State University", "dates": "2018-2020"}
        ],
        "summary_or_objective": "Data Scientist with 4+ years of experience shipping ML models.",
        "certifications": ["Google Cloud Certified Professional Data Engineer"],
        "projects": [
            {"name": "Sales Forecasting Dashboard", "description": "SQL and Python dashboard that improved forecast accuracy by 10%."}
        ],
        "languages": ["English (Native)", "Spanish (Conversational)"]
    },
    "questionnaire_prompt": "Your resume clearly shows strong data science skills...\\n\\n* **Impact and Scale:** ...\\n\\n1. Can you describe the scale of the data you worked with?"
}
```
Return ONLY this JSON object, nothing else.
"""


def build_prompt(req: "AnalysisRequest", resume_text: str) -> str:
    """Template the resume text and target fields into the analysis prompt."""
    header = (
        "You are an expert resume analyzer and career coach. Your task is to analyze a resume "
        "based on a target role, target company, and years of experience.\n"
        "Provide a structured JSON output with extracted fields and personalized feedback.\n\n"
        f"Target Role: {req.target_role}\n"
        f"Target Company: {req.target_company or 'Not specified'}\n"
        f"Years of Experience sought: {req.years_of_experience}\n\n"
        "Resume Text for Analysis:\n"
        "---\n"
        f"{resume_text}\n"
        "---\n"
    )
    return header + OUTPUT_INSTRUCTIONS
