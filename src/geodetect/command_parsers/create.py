import json
import logging

from ..helpers import InvalidOptionError, range_limited_type
from ..validation import ANNOTATION_TYPES, DETECTION_TYPES, OUTPUT_TYPES, TRAINING_STEPS_RANGE


logger = logging.getLogger(__name__)


def handle_command(options, client, parsers_map):
    if options.create == 'detector':
        detector_id = client.create_detector(
            options.name, options.detection_type, options.output_type, options.training_steps)
        logger.info('Created detector whose id is %s' % detector_id)
        for raster_id in options.raster:
            client.add_raster_to_detector(raster_id, detector_id)
            logger.info('Added raster %s to detector %s' % (raster_id, detector_id))
        print(detector_id)
    elif options.create == 'raster':
        logger.debug('Uploading raster %s..' % options.path)
        raster_id = client.upload_raster(options.path, options.name, options.folder)
        logger.info('Uploaded raster whose id is %s' % raster_id)
        for detector_id in options.detector:
            client.add_raster_to_detector(raster_id, detector_id)
            logger.info('Added raster %s to detector %s' % (raster_id, detector_id))
        print(raster_id)
    elif options.create == 'annotation':
        with open(options.path) as f:
            annotations = json.load(f)
        client.set_annotations(options.detector, options.raster, options.type, annotations)
        logger.info('Set %s annotations of raster %s in detector %s' % (
            options.type, options.raster, options.detector))
    elif options.create == 'detection_area':
        logger.debug('Setting detection area of raster %s..' % options.raster)
        client.set_raster_detection_areas_from_file(options.raster, options.path)
        logger.info('Set detection area for raster whose id is %s' % options.raster)
    else:
        raise InvalidOptionError(parsers_map['create'])


def set_parser(parser):
    create_parser = parser.add_parser('create', help="Create resources")
    create_subparsers = create_parser.add_subparsers(dest='create')
    ## Create detector
    create_detector_parser = create_subparsers.add_parser(
        'detector', help="Creates a detector, optionally adding some existing raster to it")
    create_detector_parser.add_argument("--name", help="Name of the detector", type=str)
    create_detector_parser.add_argument(
        "--detection-type", help="Detection type of the detector",
        type=str, choices=DETECTION_TYPES, default='count')
    create_detector_parser.add_argument(
        "--output-type", help="Output type of the detector",
        type=str, choices=OUTPUT_TYPES, default='polygon')
    create_detector_parser.add_argument(
        "--training-steps", type=range_limited_type(*TRAINING_STEPS_RANGE), default=500,
        help="Number of steps while training the detector: an integer in the range 500..40000")
    create_detector_parser.add_argument(
        "-r", "--raster", help="ID(s) of the raster(s) to associate with the detector",
        type=str, required=False, nargs='+', default=[])
    ## Create raster
    create_raster_parser = create_subparsers.add_parser(
        'raster', help="Uploads a raster from a local file, optionally adding it to a detector")
    create_raster_parser.add_argument("path", help="Path to the raster file", type=str)
    create_raster_parser.add_argument(
        "--name", help="Name to give to the raster", type=str, required=False)
    create_raster_parser.add_argument(
        "--folder", help="Id of the folder/project to which the raster will be uploaded",
        type=str, required=False)
    create_raster_parser.add_argument(
        "-d", "--detector", help="ID(s) of the detector(s) to which we'll associate the raster",
        type=str, required=False, nargs='+', default=[])
    ## Create annotation
    create_annotation_parser = create_subparsers.add_parser(
        'annotation', help="Replaces the annotations of a given type of a raster in a detector")
    create_annotation_parser.add_argument(
        "path", help="Path to the GeoJSON file with the annotations", type=str)
    create_annotation_parser.add_argument("raster", help="ID of the raster", type=str)
    create_annotation_parser.add_argument("detector", help="ID of the detector", type=str)
    create_annotation_parser.add_argument(
        "type", help="Type of the annotations", type=str, choices=ANNOTATION_TYPES)
    ## Create detection area
    create_detectionarea_parser = create_subparsers.add_parser(
        'detection_area', help="Sets the detection areas of a raster from a GeoJSON file")
    create_detectionarea_parser.add_argument(
        "path", help="Path to the GeoJSON file with the detection areas", type=str)
    create_detectionarea_parser.add_argument("raster", help="ID of the raster", type=str)
    parsers_map = {
        'create': create_parser,
        'detector': create_detector_parser,
        'raster': create_raster_parser,
        'annotation': create_annotation_parser,
        'detection_area': create_detectionarea_parser
    }
    create_parser.set_defaults(func=lambda a, client: handle_command(a, client, parsers_map))
