"""
Form Validation
===============

Each validator returns a dict of field -> message. An empty dict means
the form may be submitted to the API.
"""

import re

VALIDATION_RULES = {
    'NEWS_TITLE_MAX_LENGTH': 200,
    'HEADLINE_MAX_LENGTH': 500,
    'NEWS_CONTENT_MIN_LENGTH': 10,
    'NEWS_SOURCE_MAX_LENGTH': 200,
    'CATEGORY_NAME_MAX_LENGTH': 100,
    'CATEGORY_DESCRIPTION_MAX_LENGTH': 500,
    'TAG_NAME_MAX_LENGTH': 50,
    'TAG_NOTE_MAX_LENGTH': 200,
    'ACCOUNT_NAME_MAX_LENGTH': 50,
    'ACCOUNT_EMAIL_MAX_LENGTH': 100,
    'PASSWORD_MIN_LENGTH': 6,
    'PASSWORD_MAX_LENGTH': 100,
    'REGISTER_NAME_MIN_LENGTH': 2,
    'REGISTER_PASSWORD_MIN_LENGTH': 8,
    'MIN_SEARCH_LENGTH': 2,
    'MAX_SEARCH_LENGTH': 100,
}

EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def is_valid_email(email):
    return bool(email) and bool(EMAIL_REGEX.match(email))


def _text(data, key):
    value = data.get(key)
    return value if isinstance(value, str) else ('' if value is None else str(value))


def validate_account(data, is_new=True):
    errors = {}
    name = _text(data, 'account_name')
    email = _text(data, 'account_email')
    password = _text(data, 'account_password')

    if not name.strip():
        errors['account_name'] = 'Account name is required'
    elif len(name) > VALIDATION_RULES['ACCOUNT_NAME_MAX_LENGTH']:
        errors['account_name'] = 'Account name must be 50 characters or less'

    if not email.strip():
        errors['account_email'] = 'Email is required'
    elif not is_valid_email(email):
        errors['account_email'] = 'Please enter a valid email address'
    elif len(email) > VALIDATION_RULES['ACCOUNT_EMAIL_MAX_LENGTH']:
        errors['account_email'] = 'Email must be 100 characters or less'

    # Passwords are only set on creation; updates use reset-password
    if is_new:
        if not password.strip():
            errors['account_password'] = 'Password is required'
        elif len(password) < VALIDATION_RULES['PASSWORD_MIN_LENGTH']:
            errors['account_password'] = 'Password must be at least 6 characters'

    return errors


def validate_category(data):
    errors = {}
    name = _text(data, 'category_name')
    description = _text(data, 'category_description')

    if not name.strip():
        errors['category_name'] = 'Category name is required'
    elif len(name) > VALIDATION_RULES['CATEGORY_NAME_MAX_LENGTH']:
        errors['category_name'] = 'Category name must be 100 characters or less'

    if description and len(description) > VALIDATION_RULES['CATEGORY_DESCRIPTION_MAX_LENGTH']:
        errors['category_description'] = 'Description must be 500 characters or less'

    return errors


def validate_tag(data):
    errors = {}
    name = _text(data, 'tag_name')
    note = _text(data, 'note')

    if not name.strip():
        errors['tag_name'] = 'Tag name is required'
    elif len(name) > VALIDATION_RULES['TAG_NAME_MAX_LENGTH']:
        errors['tag_name'] = 'Tag name must be 50 characters or less'

    if note and len(note) > VALIDATION_RULES['TAG_NOTE_MAX_LENGTH']:
        errors['note'] = 'Note must be 200 characters or less'

    return errors


def validate_article(data):
    errors = {}
    title = _text(data, 'news_title')
    headline = _text(data, 'headline')
    content = _text(data, 'news_content')
    source = _text(data, 'news_source')
    category_id = _text(data, 'category_id')

    if not title.strip():
        errors['news_title'] = 'Title is required'
    elif len(title) > VALIDATION_RULES['NEWS_TITLE_MAX_LENGTH']:
        errors['news_title'] = 'Title must be 200 characters or less'

    if headline and len(headline) > VALIDATION_RULES['HEADLINE_MAX_LENGTH']:
        errors['headline'] = 'Headline must be 500 characters or less'

    if not content.strip():
        errors['news_content'] = 'Content is required'
    elif len(content.strip()) < VALIDATION_RULES['NEWS_CONTENT_MIN_LENGTH']:
        errors['news_content'] = 'Content must be at least 10 characters'

    if source and len(source) > VALIDATION_RULES['NEWS_SOURCE_MAX_LENGTH']:
        errors['news_source'] = 'Source must be 200 characters or less'

    if not category_id.strip() or not category_id.strip().isdecimal() or int(category_id) <= 0:
        errors['category_id'] = 'Please select a category'

    return errors


def validate_login(data):
    errors = {}
    email = _text(data, 'email').strip()
    password = _text(data, 'password')

    if not email:
        errors['email'] = 'Email is required'
    elif not is_valid_email(email):
        errors['email'] = 'Please enter a valid email address'

    if not password:
        errors['password'] = 'Password is required'
    elif len(password) < VALIDATION_RULES['PASSWORD_MIN_LENGTH']:
        errors['password'] = 'Password must be at least 6 characters'

    return errors


def validate_register(data):
    errors = {}
    name = _text(data, 'account_name').strip()
    email = _text(data, 'account_email').strip()
    password = _text(data, 'account_password')
    confirm = _text(data, 'confirm_password')

    if not name:
        errors['account_name'] = 'Full name is required'
    elif len(name) < VALIDATION_RULES['REGISTER_NAME_MIN_LENGTH']:
        errors['account_name'] = 'Full name must be at least 2 characters'

    if not email:
        errors['account_email'] = 'Email is required'
    elif not is_valid_email(email):
        errors['account_email'] = 'Please enter a valid email address'

    if not password:
        errors['account_password'] = 'Password is required'
    elif len(password) < VALIDATION_RULES['REGISTER_PASSWORD_MIN_LENGTH']:
        errors['account_password'] = 'Password must be at least 8 characters'

    if password != confirm:
        errors['confirm_password'] = 'Passwords do not match'

    return errors


def validate_change_password(data):
    errors = {}
    old = _text(data, 'old_password')
    new = _text(data, 'new_password')
    confirm = _text(data, 'confirm_password')

    if not old:
        errors['old_password'] = 'Current password is required'

    if not new:
        errors['new_password'] = 'New password is required'
    elif len(new) < VALIDATION_RULES['PASSWORD_MIN_LENGTH']:
        errors['new_password'] = 'New password must be at least 6 characters'
    elif len(new) > VALIDATION_RULES['PASSWORD_MAX_LENGTH']:
        errors['new_password'] = 'New password must be 100 characters or less'
    elif new == old:
        errors['new_password'] = 'New password must be different from current password'

    if not confirm:
        errors['confirm_password'] = 'Please confirm your new password'
    elif new != confirm:
        errors['confirm_password'] = 'Passwords do not match'

    return errors


def normalize_search_keyword(keyword):
    """Trimmed keyword, or None when it is too short to search for"""
    keyword = (keyword or '').strip()
    if len(keyword) < VALIDATION_RULES['MIN_SEARCH_LENGTH']:
        return None
    return keyword[:VALIDATION_RULES['MAX_SEARCH_LENGTH']]


def password_strength(password):
    """Return (score, label) where score counts length >= 8, upper, lower, digit, symbol"""
    if not password:
        return 0, ''

    score = 0
    if len(password) >= 8:
        score += 1
    if re.search(r'[A-Z]', password):
        score += 1
    if re.search(r'[a-z]', password):
        score += 1
    if re.search(r'\d', password):
        score += 1
    if re.search(r'[^A-Za-z0-9]', password):
        score += 1

    if score < 2:
        return score, 'Weak'
    if score < 4:
        return score, 'Medium'
    return score, 'Strong'
