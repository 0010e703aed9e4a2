from flask import Blueprint, jsonify, render_template_string, request

from paramshield.middleware import escaped_params

echo_bp = Blueprint('echo', __name__)

ECHO_TEMPLATE = '<p>You searched for {{ q }}</p>'


@echo_bp.route('', methods=['GET', 'POST'])
def echo():
    """
    Return the parameters exactly as the view sees them
    GET /echo?q=<script>
    POST /echo  (form encoded or multipart)
    """
    return jsonify({
        'args': request.args.to_dict(flat=False),
        'form': request.form.to_dict(flat=False),
        'files': sorted(request.files.keys()),
    }), 200


@echo_bp.route('/render', methods=['GET'])
def render():
    """
    Render the q parameter into HTML; escaped values are not escaped again
    GET /echo/render?q=<b>hi</b>
    """
    return render_template_string(ECHO_TEMPLATE, q=request.args.get('q', ''))


@echo_bp.route('/link', methods=['GET'])
@escaped_params(escape=['url', 'html'], mark_safe=False)
def link():
    """
    Build a link from the next parameter with its own escaping options
    GET /echo/link?next=/a b
    """
    return jsonify({'href': '/redirect?to=' + request.args.get('next', '')}), 200
