import dxfcrop


advice = dxfcrop.describe_geometry("POLYGON ((30 10, 40 40, 20 40, 10 20, 30 10))")
print(advice.geometry_type, advice.is_valid)
print(advice.description)
