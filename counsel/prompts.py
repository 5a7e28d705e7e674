"""
Centralized prompt templates for Counsel LLM interactions.

Templates use `{{name}}` placeholders and are filled with `render()`, so the
JSON examples and CSS blocks inside them need no brace escaping.
"""

import re

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render(template: str, **values: str) -> str:
    """Substitute `{{name}}` placeholders. Unknown placeholders are left as-is."""
    def _replace(match):
        name = match.group(1)
        return str(values[name]) if name in values else match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


_CORE_IDENTITY = """You are a knowledgeable legal assistant specializing in legal analysis, research, and document review."""

_CHAT_GUIDELINES = """Provide a helpful, concise, and accurate response to the user's query. Focus on delivering practical legal information while:
- Citing general legal principles or doctrines when relevant
- Being precise with terminology
- Maintaining a professional tone
- Acknowledging limitations of general advice vs. specific legal counsel when appropriate"""

# ------------------------------------------------------------------------------
# 1. GENERAL CONVERSATION
# ------------------------------------------------------------------------------
CHAT_PROMPT = f"""{_CORE_IDENTITY}

{{{{history}}}}USER QUERY: {{{{query}}}}

{_CHAT_GUIDELINES}

If this is a hypothetical scenario, analyze it thoughtfully. If it requires specific legal expertise, acknowledge that while providing general information."""

FALLBACK_CHAT_PROMPT = f"""{_CORE_IDENTITY}

{{{{history}}}}USER QUERY: {{{{query}}}}

Note: This is a fallback response because more specialized processing was not possible.

{{{{prefix}}}}{_CHAT_GUIDELINES}"""

# ------------------------------------------------------------------------------
# 2. PARALEGAL TASK SELECTION
# ------------------------------------------------------------------------------
PARALEGAL_INTENT_PROMPT = """Based on the user's query, determine the primary paralegal task implied.
The query is: '{{query}}'

Possible tasks are:
- notes: Generating structured notes, timelines, key points, or questions about the documents.
- summarize: Creating a concise summary of the documents.
- extract: Extracting specific entities like people, dates, organizations, terms, or amounts from the documents.

Respond ONLY with one word: 'notes', 'summarize', or 'extract'."""

# ------------------------------------------------------------------------------
# 3. PARALEGAL PLUGIN
# ------------------------------------------------------------------------------
DOC_NOTES_PROMPT = """Based on the query '{{query}}' and the following document excerpts, generate structured legal notes in a professional format:

INSTRUCTIONS:
1. Create a well-formatted document with clear sections and proper indentation
2. Include only sections that are relevant to the content (not all documents will have timelines, for example)
3. Format should be clean professional text that will be displayed as-is (NO markdown symbols or formatting)
4. Use CAPITALIZED HEADERS and indentation for structure instead of markdown
5. Use bullet points (•) where appropriate
6. Include the following sections ONLY IF RELEVANT:
   - CASE SUMMARY
   - TIMELINE OF EVENTS (only if chronology is important)
   - KEY FACTS & ARGUMENTS
   - LEGAL ISSUES
   - PRECEDENT CONSIDERATIONS
   - CRITICAL QUESTIONS & FOLLOW-UPS
   - NEXT STEPS

Example format:
--------------------
LEGAL MEMORANDUM
Re: [Brief subject based on query]

CASE SUMMARY
[Concise summary paragraph]

KEY FACTS & ARGUMENTS
• [Fact/argument 1]
• [Fact/argument 2]
...

[Other relevant sections as needed]
--------------------

Document excerpts to analyze:
{{chunks}}"""

SUMMARIZE_PROMPT = """Summarize the following document excerpts in the style of a professional legal brief summary, focusing on aspects relevant to the query '{{query}}':

INSTRUCTIONS:
1. Write in a formal, concise legal style
2. Focus on the most pertinent facts and considerations
3. Organize information logically
4. Use proper legal terminology
5. Be objective and precise
6. Format as PLAIN TEXT with no markdown or special formatting symbols

Document excerpts:
{{chunks}}"""

EXTRACT_KEY_INFO_PROMPT = """From the following document excerpts, extract key entities relevant to the query '{{query}}' and present them in a professional legal index format:

INSTRUCTIONS:
1. Create a well-formatted document with clear categories
2. Only include categories that contain relevant information
3. Format as a professional legal reference document using PLAIN TEXT only (NO markdown)
4. Use appropriate legal terminology and citation formats
5. Use CAPITALIZED HEADERS and indentation for structure

Example format:
--------------------
CASE REFERENCE INDEX

PARTIES
• Smith, John (Plaintiff)
• Acme Corporation (Defendant)

KEY DATES
• January 15, 2024 - Complaint filed
• March 3, 2024 - Motion to dismiss submitted

ORGANIZATIONS
• [List relevant organizations]

DEFINED TERMS
• [List important defined terms]

MONETARY FIGURES
• [List relevant amounts and descriptions]

JURISDICTIONAL CONSIDERATIONS
• [List relevant jurisdictions]
--------------------

Document excerpts:
{{chunks}}"""

# ------------------------------------------------------------------------------
# 4. RESEARCH PLUGIN
# ------------------------------------------------------------------------------
STRUCTURED_NOTES_PROMPT = """Based on the query '{{query}}' and the provided document excerpts, generate structured notes for a legal professional in JSON format:
{
  "timeline": [],
  "keyPoints": [],
  "questions": []
}
- timeline: Chronological events with legal significance (e.g., {"date": "2024-01-01", "event": "Contract signed", "significance": "Establishes obligations"}).
- keyPoints: Specific contract clauses, case law, or facts, with sources (e.g., {"point": "Breach notice sent", "source": "Memo", "quote": "...", "implication": "..."}).
- questions: Precise gaps (e.g., "Was notice sent within contract deadline?").

Respond with the JSON object only.

Excerpts:
{{chunks}}"""

RESEARCH_BRIEF_PROMPT = """# LEGAL RESEARCH BRIEF

## QUERY
"{{query}}"

## INSTRUCTIONS
You are an expert legal research assistant analyzing a contract dispute. Produce a professional research brief that:
1. Summarizes key findings (2-3 paragraphs), focusing on breach, remedies, or defenses.
2. Answers the query with evidence from notes and web sources, citing specific clauses or cases.
3. Integrates recent case law or statutes (2020-2025) for context.
4. Cites sources:
   - Documents: [Timeline X], [Key Point Y]
   - Web: [Title, URL]
5. Analyzes source alignment (e.g., do notes and web agree?).
6. Identifies precise gaps (e.g., missing contract terms).
7. Recommends actionable steps (e.g., verify notice timing).

## STRUCTURED NOTES
{{notes}}

## WEB RESULTS
{{web}}

## OUTPUT FORMAT (HTML)
<style>
    .legal-brief { font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; background: #f9f9f9; border-radius: 8px; }
    .brief-header { text-align: center; border-bottom: 2px solid #2c3e50; padding-bottom: 10px; }
    .brief-header h1 { color: #2c3e50; margin: 0; }
    .brief-header h2 { color: #34495e; margin: 5px 0; }
    .date, .query { color: #7f8c8d; font-style: italic; }
    h3 { color: #2c3e50; border-left: 4px solid #3498db; padding-left: 10px; }
    .executive-summary, .analysis, .unanswered-questions, .recommendations, .sources { margin: 20px 0; }
    p, li { line-height: 1.6; color: #34495e; }
    ul, ol { padding-left: 20px; }
    a { color: #3498db; text-decoration: none; }
    a:hover { text-decoration: underline; }
</style>
<div class="legal-brief">
    <div class="brief-header">
        <h1>Legal Research Brief</h1>
        <h2>RE: [Query subject]</h2>
        <p class="date">Date: {{date}}</p>
        <p class="query">Query: "[Original query text]"</p>
    </div>
    <div class="executive-summary">
        <h3>EXECUTIVE SUMMARY</h3>
        [Clear overview of findings, grounded in evidence]
    </div>
    <div class="analysis">
        <h3>ANALYSIS</h3>
        [Detailed response with clause analysis, case law, and citations]
    </div>
    <div class="unanswered-questions">
        <h3>UNANSWERED QUESTIONS</h3>
        [Specific gaps, e.g., unclear payment terms]
    </div>
    <div class="recommendations">
        <h3>RECOMMENDATIONS</h3>
        [Practical steps, e.g., review contract]
    </div>
    <div class="sources">
        <h3>SOURCES</h3>
        <h4>Documents</h4>
        [Document citations]
        <h4>Web</h4>
        [Web citations]
    </div>
</div>"""

# ------------------------------------------------------------------------------
# 5. EXAMINE PLUGIN
# ------------------------------------------------------------------------------
LEGAL_ANALYSIS_PROMPT = """# LEGAL ARGUMENT ANALYSIS

## QUERY
"{{query}}"

## INSTRUCTIONS
You are an expert legal assistant tasked with analyzing documents and web sources to construct precise legal arguments for a contract dispute. Produce a detailed yet concise analysis that:
1. Extracts key passages related to contract clauses, timelines, breaches, or remedies.
2. Explains passage relevance to the query, focusing on legal implications (e.g., materiality, waiver, damages).
3. Cross-checks document chunks for consistency (e.g., notice timing, performance details).
4. Integrates web-sourced case law or statutes (2020-2025) to support arguments.
5. Cites sources clearly:
   - Documents: [Doc ID: <DocumentId>, Score: <Score>]
   - Web: [<Title>, <URL>]
6. Identifies gaps needing clarification (e.g., missing contract terms).
7. Avoids judgments; presents objective findings.

## DOCUMENT CHUNKS
{{document_chunks}}

## WEB RESULTS
{{web}}

## OUTPUT FORMAT (HTML)
<style>
.legal-analysis { font-family: Arial, sans-serif; max-width: 800px; margin: 20px auto; padding: 20px; background: #f9f9f9; border-radius: 8px; }
h1, h2, h3 { color: #2c3e50; }
h3 { border-left: 4px solid #3498db; padding-left: 10px; }
p, li { line-height: 1.6; color: #34495e; }
ul { padding-left: 20px; }
a { color: #3498db; text-decoration: none; }
a:hover { text-decoration: underline; }
.error { color: #e74c3c; font-weight: bold; }
</style>
<div class="legal-analysis">
    <h1>Legal Argument Analysis</h1>
    <h2>Query: {{query}}</h2>
    <div>
        <h3>Relevant Passages</h3>
        <ul>
            [List passages with legal context, clause details, and citations]
        </ul>
    </div>
    <div>
        <h3>Precedent and Principle Comparison</h3>
        <p>[Analyze documents and web-sourced cases/statutes, focusing on relevance to breach, remedies, or defenses]</p>
    </div>
    <div>
        <h3>Gaps and Ambiguities</h3>
        <ul>
            [List specific unresolved issues, e.g., unclear terms, missing notices]
        </ul>
    </div>
    <div>
        <h3>Metadata</h3>
        <p>Documents Analyzed: {{document_count}}</p>
        <p>Search Confidence Score: {{average_score}}</p>
        <p>Analysis Timestamp: {{timestamp}}</p>
    </div>
</div>"""

# ------------------------------------------------------------------------------
# 6. CALENDAR EVENT EXTRACTION
# ------------------------------------------------------------------------------
CALENDAR_EVENT_PROMPT = """Extract event details from the following query. Return a JSON object with the following fields:
- title (string, event name)
- dateText (string, the raw date/time text from the query like 'tomorrow', 'next Friday', etc.)
- timeText (string, the raw time text from the query like '10 AM', '2:30 PM', etc.)
- description (string, optional, event details)
- durationMinutes (integer, optional, event duration in minutes - default to 60 if not specified)

For ambiguous queries, extract as much information as possible.
Respond with the JSON object only.

Query: {{query}}"""
