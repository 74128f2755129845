#!/usr/bin/env python3

import json

from geodetect import GeodetectClient

# Set the GEODETECT_API_KEY environment variable to define your API key
client = GeodetectClient()

# Create a new detector (its type is 'count' by default)
detector_id = client.create_detector("My first detector")

# Upload a training raster for the detector above
raster_id = client.upload_raster("data/raster1.tif", name="a nice raster")
client.add_raster_to_detector(raster_id, detector_id)

# Add annotations
for annotation_type in ("outline", "training_area", "validation_area"):
    with open("data/%s.geojson" % annotation_type) as f:
        client.set_annotations(detector_id, raster_id, annotation_type, json.load(f))

# Train the detector; this returns once the training is over
client.train_detector(detector_id)

# At this point your detector is ready to predict: see upload_and_detect.py in order
# to launch a prediction on a raster; you can also use one of the raster already added above.
