import logging


logger = logging.getLogger(__name__)


def handle_command(options, client):
    logger.info('Running %s on %s' % (options.detector, options.raster))
    logger.debug('Starting detection..')
    operation_id = client.run_detector(options.detector, options.raster)
    if options.output_file:
        client.download_result_to_file(operation_id, options.output_file)
        logger.debug('Detection finished, result written to %s' % options.output_file)
    else:
        url = client.get_operation_results_url(operation_id)
        logger.debug('Detection finished, outputting result URL')
        # return value
        print(url)


def set_parser(parser):
    detect_parser = parser.add_parser(
        'detect',
        help=(
            'Predict on a raster with a detector, either returning the result URL' +
            ' or saving the result to a local file'))
    detect_parser.add_argument("raster", help="ID of a raster", type=str)
    detect_parser.add_argument("detector", help="ID of a detector", type=str)
    detect_parser.add_argument(
        "--output-file", type=str, required=False,
        help=(
            "Path of the file in which the result GeoJSON should be saved. " +
            "If this is not set, the result URL will be printed to stdout"
        )
    )
    detect_parser.set_defaults(func=handle_command)
