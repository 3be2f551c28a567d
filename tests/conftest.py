import pytest


@pytest.fixture(scope="session")
def payload_class():
    """
    MigrationPayload message class assembled from a descriptor at runtime,
    used as the reference encoder for the hand-written decoder.

    Enums are declared as int32 so out-of-range values can be serialised.
    OtpParameters also carries the unique_id field newer exporters add.
    """
    descriptor_pb2 = pytest.importorskip("google.protobuf.descriptor_pb2")
    from google.protobuf import descriptor_pool, message_factory

    file_descriptor_proto = descriptor_pb2.FileDescriptorProto()
    file_descriptor_proto.name = "otpmigrate_test.proto"
    file_descriptor_proto.package = "otpmigrate_test"
    file_descriptor_proto.syntax = "proto3"

    msg = file_descriptor_proto.message_type.add()
    msg.name = "MigrationPayload"

    inner_msg = msg.nested_type.add()
    inner_msg.name = "OtpParameters"

    # 12=bytes, 9=string, 5=int32, 3=int64
    fields = [
        ("secret", 1, 12),
        ("name", 2, 9),
        ("issuer", 3, 9),
        ("algorithm", 4, 5),
        ("digits", 5, 5),
        ("type", 6, 5),
        ("counter", 7, 3),
        ("unique_id", 8, 9),
    ]
    for f_name, f_num, f_type in fields:
        f = inner_msg.field.add()
        f.name, f.number, f.label, f.type = f_name, f_num, 1, f_type

    f = msg.field.add()
    f.name, f.number, f.label, f.type, f.type_name = (
        "otp_parameters", 1, 3, 11, ".otpmigrate_test.MigrationPayload.OtpParameters"
    )
    for i, f_name in enumerate(["version", "batch_size", "batch_index", "batch_id"], 2):
        f = msg.field.add()
        f.name, f.number, f.label, f.type = f_name, i, 1, 5

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_descriptor_proto.SerializeToString())
    return message_factory.GetMessageClass(
        pool.FindMessageTypeByName("otpmigrate_test.MigrationPayload")
    )
