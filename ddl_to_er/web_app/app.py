# -*- coding: utf-8 -*-
"""
ER Diagram Web Application - Flask JSON API in front of the DDL parser
"""
import io
import logging

import graphviz
from flask import Flask, Blueprint, current_app, jsonify, request, send_file
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .. import __version__
from ..core import build_er_model, render_mermaid, ERDiagramRenderer
from ..core.doc_generator import generate_html, generate_docx
from ..core.visualization import SUPPORTED_FORMATS
from .app_config import get_config
from .parse_cache import ParseCache

api = Blueprint('api', __name__, url_prefix='/api')

IMAGE_MIMETYPES = {
    'png': 'image/png',
    'svg': 'image/svg+xml',
    'pdf': 'application/pdf',
}
DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'


def create_app(config_object=None) -> Flask:
    """Create the Flask application; `config_object` defaults to the FLASK_ENV config"""
    app = Flask(__name__)
    app.config.from_object(config_object or get_config())
    # 表和列按 DDL 声明顺序输出
    app.json.sort_keys = False

    logging.basicConfig(
        level=str(app.config['LOG_LEVEL']).upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    CORS(app)
    Limiter(
        get_remote_address,
        app=app,
        default_limits=[app.config['RATELIMIT_DEFAULT']],
        storage_uri=app.config['RATELIMIT_STORAGE_URI']
    )

    app.extensions['parse_cache'] = ParseCache(
        max_size=app.config['PARSE_CACHE_SIZE'],
        ttl=app.config['PARSE_CACHE_TTL']
    )
    app.register_blueprint(api)
    return app


def _read_sql():
    """
    Return (sql, None) from the JSON body, or (None, error_response)
    """
    data = request.get_json(silent=True) or {}
    sql = data.get('sql')

    if not isinstance(sql, str):
        return None, (jsonify({'error': "Request body must contain a 'sql' string"}), 400)

    max_length = current_app.config['MAX_SQL_LENGTH']
    if len(sql) > max_length:
        return None, (jsonify({'error': f'SQL content exceeds the maximum of {max_length} characters'}), 413)

    return sql, None


def _parse(sql: str):
    return current_app.extensions['parse_cache'].parse(sql)


@api.route('/health', methods=['GET'])
def api_health():
    return jsonify({'status': 'ok', 'version': __version__})


@api.route('/parse', methods=['POST'])
def api_parse():
    """解析SQL，返回完整的 Schema"""
    sql, error_response = _read_sql()
    if error_response:
        return error_response

    try:
        schema = _parse(sql)
        return jsonify(schema.to_dict())
    except Exception as e:
        current_app.logger.error(f"An unexpected error occurred in api_parse: {e}")
        return jsonify({'error': str(e)}), 500


@api.route('/diagram', methods=['POST'])
def api_diagram():
    """解析SQL并生成ER图数据"""
    sql, error_response = _read_sql()
    if error_response:
        return error_response

    try:
        schema = _parse(sql)
        projection = build_er_model(schema)
        return jsonify({
            'success': schema.success,
            'errors': [e.to_dict() for e in schema.errors],
            'warnings': [w.to_dict() for w in schema.warnings],
            'stats': schema.stats.to_dict(),
            'diagram': projection.to_dict(),
            'mermaid': render_mermaid(projection),
        })
    except Exception as e:
        current_app.logger.error(f"An unexpected error occurred in api_diagram: {e}")
        return jsonify({'error': str(e)}), 500


@api.route('/render', methods=['POST'])
def api_render():
    """Render the ER diagram with Graphviz and return the image"""
    sql, error_response = _read_sql()
    if error_response:
        return error_response

    data = request.get_json(silent=True) or {}
    fmt = str(data.get('format', 'png')).lower()
    if fmt not in SUPPORTED_FORMATS:
        return jsonify({'error': f"Invalid format, use one of: {', '.join(SUPPORTED_FORMATS)}"}), 400

    try:
        projection = build_er_model(_parse(sql))
        image = ERDiagramRenderer('er_diagram', fmt).render(projection).pipe()
    except graphviz.ExecutableNotFound as e:
        current_app.logger.error(f"Graphviz executable not available: {e}")
        return jsonify({'error': 'Diagram rendering is unavailable: Graphviz is not installed'}), 503
    except Exception as e:
        current_app.logger.error(f"An unexpected error occurred in api_render: {e}")
        return jsonify({'error': str(e)}), 500

    return send_file(
        io.BytesIO(image),
        mimetype=IMAGE_MIMETYPES[fmt],
        as_attachment=True,
        download_name=f'er_diagram.{fmt}'
    )


@api.route('/generate_doc', methods=['POST'])
def api_generate_doc():
    """
    解析SQL并生成指定格式的数据库结构文档
    """
    sql, error_response = _read_sql()
    if error_response:
        return error_response

    data = request.get_json(silent=True) or {}
    output_format = data.get('format', 'html')  # 'html' or 'docx'

    try:
        schema = _parse(sql)
        if not schema.tables:
            return jsonify({'error': 'No table definitions found', 'errors': [
                e.to_dict() for e in schema.errors
            ]}), 400

        if output_format == 'html':
            return jsonify({'html': generate_html(schema)})

        elif output_format == 'docx':
            buffer = io.BytesIO()
            generate_docx(schema, buffer)
            buffer.seek(0)
            return send_file(
                buffer,
                as_attachment=True,
                download_name='database_schema.docx',
                mimetype=DOCX_MIMETYPE
            )

        else:
            return jsonify({'error': 'Invalid format, use "html" or "docx"'}), 400

    except Exception as e:
        current_app.logger.error(f"Error generating document: {e}")
        return jsonify({'error': f'Failed to generate document: {str(e)}'}), 500
