"""
Web API for JDK Manager
Small Flask JSON interface over a JDKRegistry
"""
import os

from flask import Flask, jsonify, request

from jdk_manager import JDKRegistry
from jdk_settings import Settings


def create_app(registry=None):
    """Build the Flask app around a registry (a fresh one by default)."""
    app = Flask(__name__)
    app.config['REGISTRY'] = registry or JDKRegistry(Settings(os.environ.get('JDK_SETTINGS', 'jdk_settings.json')))

    def _registry():
        return app.config['REGISTRY']

    # ============================================================================
    # API ENDPOINTS
    # ============================================================================

    @app.route('/api/jdks')
    def api_jdk_list():
        """List JDKs, optionally filtered by ?min= and ?max= (inclusive)"""
        try:
            jdks = _registry().get_jdks_in_version_range(
                request.args.get('min') or None,
                request.args.get('max') or None,
            )
        except (TypeError, ValueError) as e:
            return jsonify({'success': False, 'error': str(e)}), 400

        return jsonify({
            'success': True,
            'count': len(jdks),
            'jdks': [jdk.to_dict() for jdk in jdks],
        })

    @app.route('/api/jdks/refresh', methods=['POST'])
    def api_jdk_refresh():
        """Rescan the machine"""
        try:
            jdks = _registry().refresh()
            return jsonify({
                'success': True,
                'found': len(jdks),
                'jdks': [jdk.to_dict() for jdk in jdks],
            })
        except Exception as e:
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/jdks/skipped')
    def api_jdk_skipped():
        """Candidates from the last refresh that did not yield a JDK"""
        report = _registry().last_report
        skipped = report.skipped if report else []
        return jsonify({
            'success': True,
            'skipped': [
                {
                    'source': o.source.value,
                    'candidate': o.candidate,
                    'reason': o.reason.value if o.reason else None,
                }
                for o in skipped
            ],
        })

    return app


if __name__ == '__main__':
    print("=" * 60)
    print("☕ JDK MANAGER - WEB API")
    print("=" * 60)
    app = create_app()
    app.config['REGISTRY'].refresh()
    port = int(os.environ.get('PORT', 5000))
    print(f"\n✅ Listening on http://0.0.0.0:{port}/api/jdks\n")
    app.run(host='0.0.0.0', port=port, debug=False)
