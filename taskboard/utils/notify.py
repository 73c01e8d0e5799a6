from flask import flash

SUCCESS = 'success'
INFO = 'info'
ERROR = 'error'

SAVE_FAILED = 'Failed to save data'


def flash_form_errors(form):
    """Flash the first error of each invalid field as an error notification."""
    for field_name, errors in form.errors.items():
        if errors:
            flash(errors[0], ERROR)
