#!/usr/bin/env python3

from geodetect import GeodetectClient, ValidationError

# Set the GEODETECT_API_KEY environment variable to define your API key
client = GeodetectClient()

# Create a new detector (its type is 'count' by default)
detector_id = client.create_detector("My first detector")

# Edit the above detector
client.edit_detector(detector_id, "Renamed detector", "segmentation", "bbox", 1000)

# Settings are checked before anything is sent
try:
    client.edit_detector(detector_id, training_steps=100)
except ValidationError as e:
    print(e)

# List existing detectors
for d in client.list_detectors():
    print(
        "detector id=%s, name=%s, detection_type=%s, output_type=%s, training_steps=%d"
        % (
            d["id"],
            d["name"],
            d["configuration"]["detection_type"],
            d["configuration"]["output_type"],
            d["configuration"]["training_steps"],
        )
    )
