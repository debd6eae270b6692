import dxfcrop


result = dxfcrop.crop(
    "examples/data/site_plan.dxf",
    "/tmp/site_plan_cropped.dxf",
    "POLYGON ((0 0, 250 0, 250 180, 0 180, 0 0))",
)
print(result)
