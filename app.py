"""
PoolStrip CV Service - Flask Application
Estimates pool water chemistry from photos of multi-pad test strips
"""

from flask import Flask, request, jsonify, g
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import cv2
import numpy as np
import logging
import time
import uuid
import os
from werkzeug.exceptions import RequestEntityTooLarge
from dotenv import load_dotenv

from config.analysis_config import ANALYZE_RATE_LIMIT, MAX_CONTENT_LENGTH_MB
from services.exceptions import ImageDecodeError
from services.interfaces import Brand
from services.pipeline import StripAnalysisService

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)
CORS(app)

# Determine if we're in production mode
is_production = os.getenv('FLASK_DEBUG', 'False').lower() != 'true'


# Request ID middleware for tracing
@app.before_request
def generate_request_id():
    """Generate or use existing request ID for tracing."""
    g.request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
    logger.debug(f'[Request {g.request_id}] {request.method} {request.path}')


@app.after_request
def add_request_id_header(response):
    """Add request ID to response headers."""
    if hasattr(g, 'request_id'):
        response.headers['X-Request-ID'] = g.request_id
    return response


def sanitize_error_message(error: Exception) -> str:
    """
    Sanitize error messages for production.

    In production, returns generic messages to prevent information disclosure.
    In development, returns full error details for debugging.

    Args:
        error: Exception object

    Returns:
        Sanitized error message string
    """
    if is_production:
        return "An internal error occurred. Please try again later."
    else:
        return str(error)


# Rate limiting configuration
limiter = Limiter(
    app=app,
    key_func=get_remote_address,
    default_limits=["200 per hour", "20 per minute"],
    storage_uri="memory://",  # In-memory storage (use Redis in production for multi-instance)
    headers_enabled=True,
    enabled=os.getenv('RATE_LIMIT_ENABLED', 'true').lower() == 'true'
)

# Configuration
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH_MB * 1024 * 1024

# Initialize services (fails fast on inconsistent layouts/palettes)
analysis_service = StripAnalysisService()


@app.errorhandler(413)
def request_entity_too_large(error):
    """Reject uploads above MAX_CONTENT_LENGTH."""
    return jsonify({
        'success': False,
        'error': f'Image exceeds the {MAX_CONTENT_LENGTH_MB}MB upload limit',
        'error_code': 'PAYLOAD_TOO_LARGE'
    }), 413


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': 'poolstrip-cv-service',
        'opencv_version': cv2.__version__,
        'numpy_version': np.__version__
    })


@app.route('/brands', methods=['GET'])
def list_brands():
    """List supported strip brands and the parameters each one measures."""
    brands = []
    for brand in Brand:
        layout = analysis_service.layouts.layout_for(brand)
        brands.append({
            'id': brand.value,
            'parameters': [region.parameter.value for region in layout],
            'default': brand == analysis_service.default_brand
        })
    return jsonify({'success': True, 'data': {'brands': brands}})


@app.route('/analyze-strip', methods=['POST'])
@limiter.limit(ANALYZE_RATE_LIMIT)  # More restrictive for heavy image processing
def analyze_strip():
    """
    Estimate pool chemistry from a test strip photo.

    Pipeline: Image → Strip Localization → Pad Sampling → Lab → Palette Matching

    Request:
    - Body: raw image bytes (JPEG/PNG)
    - brand (query, optional): hth_6way, clorox_6way or aquachek_7way;
      case-insensitive, unknown values use the default brand

    Returns:
    - free_chlorine_ppm, ph, total_alkalinity_ppm, cyanuric_acid_ppm
    - notes: unmatched parameters and advisory messages
    - readings: every parameter measured by the brand layout
    - pads: sampled color (rgb, hex, lab), matched value and region per pad
    - Processing time
    """
    start_time = time.time()
    request_id = getattr(g, 'request_id', 'unknown')

    try:
        body = request.get_data(cache=False)

        if not body:
            return jsonify({
                'success': False,
                'error': 'No image data provided',
                'error_code': 'MISSING_PARAMETER'
            }), 400

        brand = request.args.get('brand')
        logger.info(f'[Request {request_id}] Analysing strip image: {len(body)} bytes, brand: {brand or "default"}')

        try:
            result = analysis_service.analyze(image_bytes=body, brand=brand)
        except ImageDecodeError as e:
            logger.warning(f'[Request {request_id}] Failed to decode image: {e}')
            return jsonify({
                'success': False,
                'error': f'Failed to load image: {e.message}',
                'error_code': e.error_code
            }), 400

        response_data = result.to_dict()
        response_data['processing_time_ms'] = int((time.time() - start_time) * 1000)

        return jsonify({
            'success': True,
            'data': response_data
        })

    except RequestEntityTooLarge:
        raise

    except Exception as e:
        logger.error(f'[Request {request_id}] Error in analyze_strip: {str(e)}', exc_info=True)
        return jsonify({
            'success': False,
            'error': sanitize_error_message(e),
            'error_code': 'INTERNAL_ERROR'
        }), 500


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'

    logger.info(f'Starting PoolStrip CV Service on port {port}')
    app.run(host='0.0.0.0', port=port, debug=debug)
