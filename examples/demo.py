"""
lz4shiatsu demonstration script.
"""

import base64

import lz4.frame

import lz4shiatsu


def main():
    print("lz4shiatsu - LZ4 Payload Recovery Demo")
    print("=" * 40)

    frame = lz4.frame.compress(b'{"sensor": "t-1", "value": 21.5}')

    examples = [
        # Junk after the opening brace plus excess closers
        ('{garbage{"a": 1, "b": 2,}}}', "Damaged JSON text"),
        # Control bytes from a flaky transport
        ('{"id": 7,\x00 "name": "pump\x1f-3"}', "Control characters"),
        # Plain LZ4 frame
        (frame, "LZ4 frame"),
        # Frame behind a duplicated magic number
        (b"\x04\x22\x4d\x18" + frame, "Frame with duplicated magic"),
        # Frame wrapped in base64 text
        (base64.b64encode(frame).decode("ascii"), "Base64-wrapped frame"),
        # Garbage after the magic number
        (b"\x04\x22\x4d\x18" + b"\xff" * 16, "Undecodable frame"),
        # Structured value worth compressing
        ({"readings": [{"sensor": "temp", "value": 21.5}] * 20}, "Compressible object"),
        # Too small to benefit from compression
        ("hello   world", "Small text"),
    ]

    for i, (payload, description) in enumerate(examples, 1):
        print(f"\n{i}. {description}")
        print(f"Input:    {payload!r:.70}")

        try:
            result = lz4shiatsu.process(payload)
            print(f"Output:   {result.payload!r:.70}")
            print(f"Metadata: {result.to_metadata()}")
            print(f"Status:   {result.status.text}")
        except Exception as e:
            print(f"Error:    {e}")

    # Drive the pipeline node with host callbacks
    print(f"\n{len(examples) + 1}. Pipeline node (base64 output)")
    node = lz4shiatsu.LZ4Node(
        {"outputFormat": "base64"},
        send=lambda msg: print(f"Sent:     {msg['lz4']}"),
        status=lambda status: print(f"Status:   {status and status.to_dict()}"),
    )
    node.on_input({"payload": {"events": ["click"] * 50}, "topic": "ui"})
    node.close()


if __name__ == "__main__":
    main()
