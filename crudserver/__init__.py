"""crud-server: 用户资源的增删改查服务"""
