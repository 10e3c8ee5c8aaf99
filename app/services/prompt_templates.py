WEBSITE_SAFETY_PROMPT = """
You are an expert in website security and fraud detection. Analyze the safety
of the given URL and provide a verdict with clear reasoning.

URL:
{content}

Consider factors such as:
- Domain age and registration information
- Presence of an SSL certificate
- Website content and design (look for suspicious elements)
- User reviews and reputation
- Known phishing or malware reports

Return STRICT JSON with these fields:
- isSafe: true if the website is safe, false if it is potentially fraudulent
- reasoning: a concise explanation of the verdict
- trustScore: number 0-100, how confident you are that the URL is safe
"""

PAYMENT_LINK_SAFETY_PROMPT = """
You are an expert in online payment security. Analyze the payment gateway link
below and decide whether it is safe or potentially fraudulent.

Payment Link:
{content}

Consider the domain, SSL certificate, reputation and any suspicious patterns or
redirects. Assess the likelihood of phishing or other malicious activity.

Return STRICT JSON with these fields:
- isSafe: true or false
- reasoning: a detailed explanation of how you reached the conclusion
- trustScore: number 0-100, how confident you are that the link is safe
"""

QR_CONTENT_SAFETY_PROMPT = """
You are an expert in data security and fraud detection. Analyze the content
extracted from a QR code and decide whether it is safe or potentially malicious.

Content:
{content}

1. Determine the type of content: URL, Text or Other (vCard, WiFi credentials, ...).
2. If the content is a URL, analyze its safety (domain reputation, SSL,
   known phishing or malware reports, suspicious parameters) and set
   extractedUrl to that URL.
3. If the content is text or other data, look for unusual commands, scripts or
   socially engineered messages.

Return STRICT JSON with these fields:
- isSafe: true or false
- reasoning: a detailed explanation of the verdict
- trustScore: number 0-100, how confident you are that the content is safe
- contentType: one of URL, Text, Other
- extractedUrl: the URL found in the content, if any
"""


def render_prompt(template: str, content: str) -> str:
    return template.format(content=content).strip()
