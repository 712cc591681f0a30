"""
Text and date helpers used by templates and services.
"""

import re
from datetime import datetime, timezone

from markupsafe import escape


def parse_datetime(value):
    """Parse an ISO timestamp from the API; returns None if unparseable"""
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in ('%Y-%m-%dT%H:%M:%S.%f', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d'):
        try:
            return datetime.strptime(text[:26], fmt)
        except ValueError:
            continue
    return None


def format_date(value, fmt='short', now=None):
    """Render a date as 'short' (dd/mm/yyyy), 'long' or 'relative'"""
    date = parse_datetime(value)
    if date is None:
        return 'Invalid date'

    if fmt == 'relative':
        if now is None:
            now = datetime.now(timezone.utc) if date.tzinfo else datetime.now()
        diff_days = (now - date).days
        if diff_days <= 0:
            return 'Today'
        if diff_days == 1:
            return 'Yesterday'
        if diff_days < 7:
            return f'{diff_days} days ago'
        if diff_days < 30:
            return f'{diff_days // 7} weeks ago'
        if diff_days < 365:
            return f'{diff_days // 30} months ago'
        return f'{diff_days // 365} years ago'

    if fmt == 'long':
        return date.strftime('%d %B %Y, %H:%M')

    return date.strftime('%d/%m/%Y')


def truncate_text(text, max_length=100):
    text = text or ''
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + '...'


def strip_html(html):
    return re.sub(r'<[^>]*>', '', html or '')


def generate_excerpt(content, max_length=200):
    return truncate_text(strip_html(content), max_length)


def format_number(num):
    return f"{num:,}".replace(',', '.')


def format_content(content):
    """Format plain-text article content as HTML paragraphs"""
    if not content:
        return ""

    # Content that already carries markup is rendered as-is
    if re.search(r'<(p|div|br|h[1-6]|ul|ol)\b', content):
        return content

    content = str(escape(content))
    content = re.sub(r'\n\s*\n', '</p><p>', content)
    content = re.sub(r'\n', '<br>', content)
    content = f'<p>{content}</p>'
    content = re.sub(r'<p>\s*</p>', '', content)

    content = re.sub(r'\*\*(.*?)\*\*', r'<strong>\1</strong>', content)
    content = re.sub(r'\*(.*?)\*', r'<em>\1</em>', content)

    return content
